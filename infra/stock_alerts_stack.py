import os
from constructs import Construct
from aws_cdk import (
    Stack,
    Duration,
    aws_dynamodb as ddb,
    aws_lambda as _lambda,
    aws_iam as iam,
    aws_events as events,
    aws_events_targets as targets,
    aws_apigatewayv2 as apigwv2,
    aws_apigatewayv2_integrations as integrations,
    aws_lambda_event_sources as event_sources,
    RemovalPolicy,
    CfnOutput,
)

PROJECT_ROOT = os.path.join(os.path.dirname(__file__), '..')

# Todo lo que no necesita el runtime de Lambda
ASSET_EXCLUDES = ['infra', 'tests', 'cdk.out', '.venv', '.git', '*.md', '*.txt', 'pyproject.toml', '**/__pycache__']


class StockAlertsStack(Stack):
    def __init__(self, scope: Construct, id: str, **kwargs) -> None:
        super().__init__(scope, id, **kwargs)

        # Config via env (or .env antes de invocar cdk deploy)
        sender = os.environ.get('MAIL_FROM', 'UniAsia <no-reply@uniasia.shop>')
        fallback_emails = os.environ.get('ADMIN_FALLBACK_EMAILS', '')
        webhook_secret = os.environ.get('LOW_STOCK_WEBHOOK_SECRET', '')
        threshold = os.environ.get('LOW_STOCK_THRESHOLD', '5')
        inventory_name = os.environ.get('DDB_TABLE', 'Inventory')

        # DynamoDB
        inventory = ddb.Table(self, 'InventoryTable',
            table_name=inventory_name,
            partition_key=ddb.Attribute(name='Sku', type=ddb.AttributeType.STRING),
            billing_mode=ddb.BillingMode.PAY_PER_REQUEST,
            stream=ddb.StreamViewType.NEW_AND_OLD_IMAGES,
            removal_policy=RemovalPolicy.DESTROY
        )

        accounts = ddb.Table(self, 'AccountsTable',
            partition_key=ddb.Attribute(name='Email', type=ddb.AttributeType.STRING),
            billing_mode=ddb.BillingMode.PAY_PER_REQUEST,
            removal_policy=RemovalPolicy.DESTROY
        )

        activity_log = ddb.Table(self, 'ActivityLogTable',
            partition_key=ddb.Attribute(name='Id', type=ddb.AttributeType.STRING),
            billing_mode=ddb.BillingMode.PAY_PER_REQUEST,
            removal_policy=RemovalPolicy.DESTROY
        )

        environment = {
            'DDB_TABLE': inventory.table_name,
            'ACCOUNTS_TABLE': accounts.table_name,
            'ACTIVITY_LOG_TABLE': activity_log.table_name,
            'LOW_STOCK_THRESHOLD': threshold,
            'ADMIN_FALLBACK_EMAILS': fallback_emails,
            'LOW_STOCK_WEBHOOK_SECRET': webhook_secret,
            'MAIL_FROM': sender,
        }
        code = _lambda.Code.from_asset(PROJECT_ROOT, exclude=ASSET_EXCLUDES)
        send_email = iam.PolicyStatement(actions=['ses:SendEmail'], resources=['*'])

        def function(construct_id, lambda_dir):
            fn = _lambda.Function(self, construct_id,
                runtime=_lambda.Runtime.PYTHON_3_11,
                handler=f'lambdas.{lambda_dir}.app.lambda_handler',
                code=code,
                environment=environment,
                timeout=Duration.seconds(30)
            )
            accounts.grant_read_data(fn)
            activity_log.grant_write_data(fn)
            fn.add_to_role_policy(send_email)
            return fn

        # Lambdas
        notify_lambda = function('NotifyLowStockFn', 'notify_low_stock')
        webhook_lambda = function('LowStockWebhookFn', 'low_stock_webhook')
        report_lambda = function('LowStockReportFn', 'low_stock_report')
        sweep_lambda = function('LowStockSweepFn', 'low_stock_sweep')
        expiry_lambda = function('ExpiryAlertFn', 'expiry_alert')

        inventory.grant_read_data(sweep_lambda)
        inventory.grant_read_data(expiry_lambda)

        # Event source mapping (DynamoDB Streams -> Lambda)
        notify_lambda.add_event_source(event_sources.DynamoEventSource(inventory, starting_position=_lambda.StartingPosition.LATEST, batch_size=100))

        # HTTP API + integrations
        http_api = apigwv2.HttpApi(self, 'StockAlertsHttpApi',
            cors_preflight=apigwv2.CorsPreflightOptions(
                allow_origins=['*'],
                allow_methods=[apigwv2.CorsHttpMethod.GET, apigwv2.CorsHttpMethod.POST],
                allow_headers=['*']
            )
        )
        http_api.add_routes(path='/webhooks/low-stock', methods=[apigwv2.HttpMethod.POST],
            integration=integrations.HttpLambdaIntegration('WebhookIntegration', handler=webhook_lambda))
        http_api.add_routes(path='/alerts/low-stock', methods=[apigwv2.HttpMethod.POST],
            integration=integrations.HttpLambdaIntegration('ReportIntegration', handler=report_lambda))
        http_api.add_routes(path='/alerts/low-stock/run', methods=[apigwv2.HttpMethod.GET, apigwv2.HttpMethod.POST],
            integration=integrations.HttpLambdaIntegration('SweepIntegration', handler=sweep_lambda))
        http_api.add_routes(path='/alerts/low-stock/expiry', methods=[apigwv2.HttpMethod.GET, apigwv2.HttpMethod.POST],
            integration=integrations.HttpLambdaIntegration('ExpiryIntegration', handler=expiry_lambda))

        # Barridos diarios (cron en UTC; 00:00 UTC = 08:00 en Manila)
        events.Rule(self, 'LowStockSweepSchedule',
            schedule=events.Schedule.cron(minute='0', hour='0'),
            targets=[targets.LambdaFunction(sweep_lambda)]
        )
        events.Rule(self, 'ExpirySweepSchedule',
            schedule=events.Schedule.cron(minute='5', hour='0'),
            targets=[targets.LambdaFunction(expiry_lambda)]
        )

        # Outputs
        CfnOutput(self, 'ApiUrl', value=http_api.api_endpoint)
        CfnOutput(self, 'InventoryTableName', value=inventory.table_name)
        CfnOutput(self, 'AccountsTableName', value=accounts.table_name)
        CfnOutput(self, 'ActivityLogTableName', value=activity_log.table_name)
