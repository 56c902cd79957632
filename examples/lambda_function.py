"""Sample Lambda handler instrumented by the ADOT layer.

This is the function the telemetry in the rest of the package comes from.
Deploy it behind an API Gateway HTTP API with the routes ``GET /`` and
``PUT /items`` and the environment described in
``lambdascope.core.environment``. Its CloudWatch logs arrive with
``awscloudwatch.log_group = /aws/lambda/<function name>`` and its metrics
with ``aws.dimensions.FunctionName = <function name>``.

Both branches always answer 200. Malformed JSON bodies and DynamoDB errors
are not handled here: they surface as Lambda invocation errors.
"""

import json
import os
from decimal import Decimal

import boto3

TABLE_NAME = os.environ.get("TABLE_NAME", "http-crud-tutorial-items")

dynamodb = boto3.resource("dynamodb")
table = dynamodb.Table(TABLE_NAME)

HEADERS = {"Content-Type": "application/json"}


def lambda_handler(event, context):
    route_key = event.get("routeKey")

    if route_key == "PUT /items":
        # DynamoDB rejects floats; prices are kept as Decimal
        request_json = json.loads(event["body"], parse_float=Decimal)
        table.put_item(
            Item={
                "id": request_json["id"],
                "price": request_json["price"],
                "name": request_json["name"],
            }
        )
        body = "Put item " + request_json["id"]
    else:
        body = "Hello from Lambda!"

    return {
        "statusCode": 200,
        "headers": HEADERS,
        "body": json.dumps(body),
    }
