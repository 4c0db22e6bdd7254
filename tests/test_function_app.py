import function_app


def test_function_app_registers_servicebus_trigger():
    functions = function_app.app.get_functions()

    assert [fn.get_function_name() for fn in functions] == ["ServiceBusProcessor"]
    bindings = functions[0].get_bindings_dict()["bindings"]
    trigger = bindings[0]
    assert trigger["type"] == "serviceBusTrigger"
    assert trigger["queueName"] == "%ServiceBusQueueName%"
    assert trigger["connection"] == "ServiceBusConnectionString"
