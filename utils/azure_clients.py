import os

from azure.cosmos import CosmosClient, PartitionKey

from utils.observability import get_logger, log_json

logger = get_logger(__name__)

PARTITION_KEY_PATH = "/MessageId"

_COSMOS_CONTAINER = None


def get_cosmos_container():
    global _COSMOS_CONTAINER
    if _COSMOS_CONTAINER is not None:
        return _COSMOS_CONTAINER

    connection_string = os.environ.get("CosmosDbConnectionString")
    if not connection_string:
        raise ValueError("CosmosDbConnectionString is not set")
    database_name = os.environ.get("CosmosDbDatabaseName", "MessageDatabase")
    container_name = os.environ.get("CosmosDbContainerName", "ServiceBusMessages")
    throughput = int(os.environ.get("CosmosDbThroughput", "400"))

    client = CosmosClient.from_connection_string(connection_string)
    database = client.create_database_if_not_exists(id=database_name)
    _COSMOS_CONTAINER = database.create_container_if_not_exists(
        id=container_name,
        partition_key=PartitionKey(path=PARTITION_KEY_PATH),
        offer_throughput=throughput,
    )
    log_json(
        logger,
        "info",
        "cosmos_container_ready",
        database=database_name,
        container=container_name,
    )
    return _COSMOS_CONTAINER
