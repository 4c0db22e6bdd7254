import azure.functions as func

from handlers.servicebus_to_cosmos.servicebus_to_cosmos import process_message

app = func.FunctionApp()


@app.function_name(name="ServiceBusProcessor")
@app.service_bus_queue_trigger(
    arg_name="message",
    queue_name="%ServiceBusQueueName%",
    connection="ServiceBusConnectionString",
)
def servicebus_processor(message: func.ServiceBusMessage) -> None:
    process_message(message)
