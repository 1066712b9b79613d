#!/usr/bin/env python3
import os
from aws_cdk import App, Environment
from stock_alerts_stack import StockAlertsStack

app = App()

# REGION / CDK_DEFAULT_ACCOUNT fijan el entorno; sin ellos el stack es agnóstico
region = os.environ.get('REGION') or os.environ.get('CDK_DEFAULT_REGION')
account = os.environ.get('CDK_DEFAULT_ACCOUNT')
env = Environment(account=account, region=region) if (region or account) else None

StockAlertsStack(app, 'UniAsiaStockAlerts', env=env,
                 description='Alertas de stock bajo y caducidad de UniAsia')

app.synth()
