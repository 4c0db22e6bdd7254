#!/usr/bin/env python3
import aws_cdk as cdk

from message_forwarder.message_forwarder_stack import MessageForwarderStack

app = cdk.App()
MessageForwarderStack(
    app,
    "MessageForwarderStack",
    env=cdk.Environment(region="us-east-1"),
)

app.synth()
