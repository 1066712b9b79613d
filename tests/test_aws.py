from datetime import date
from decimal import Decimal

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from conftest import FakeTable
from stock_alerts.activity_log import ActivityLog
from stock_alerts.config import load_settings, parse_email_list
from stock_alerts.directory import AdminDirectory
from stock_alerts.errors import DeliveryError, DirectoryError, InvalidInput, InventoryError
from stock_alerts.inventory import InventoryStore
from stock_alerts.mailer import SesMailer


def _client_error(code='MessageRejected', message='Email address is not verified.', op='SendEmail'):
    return ClientError({'Error': {'Code': code, 'Message': message}}, op)


class FakeSes:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def send_email(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        return {'MessageId': 'abc-123'}


def test_directory_follows_pagination():
    table = FakeTable(pages=[[{'Email': 'a@x.com'}], [{'Email': 'b@x.com'}, {'Email': ' '}]])

    emails = AdminDirectory(table).list_admin_emails()

    assert emails == ['a@x.com', 'b@x.com']
    assert len(table.scans) == 2
    assert table.scans[1]['ExclusiveStartKey'] == {'page': 1}
    assert table.scans[0]['ProjectionExpression'] == 'Email'


def test_directory_wraps_client_errors():
    table = FakeTable(error=_client_error('ResourceNotFoundException', 'no table', 'Scan'))
    with pytest.raises(DirectoryError):
        AdminDirectory(table).list_admin_emails()


def test_ses_single_call_for_all_recipients():
    ses = FakeSes()
    mailer = SesMailer(ses, 'UniAsia <no-reply@uniasia.shop>')

    message_id = mailer.send('Subject', 'text body', ['a@x.com', 'b@x.com'], html='<p>x</p>')

    assert message_id == 'abc-123'
    assert len(ses.calls) == 1
    call = ses.calls[0]
    assert call['Source'] == 'UniAsia <no-reply@uniasia.shop>'
    assert call['Destination'] == {'ToAddresses': ['a@x.com', 'b@x.com']}
    assert call['Message']['Body']['Html']['Data'] == '<p>x</p>'


def test_ses_text_only():
    ses = FakeSes()
    SesMailer(ses, 'x@y.com').send('S', 'T', ['a@x.com'])
    assert 'Html' not in ses.calls[0]['Message']['Body']


def test_ses_client_error_becomes_delivery_error():
    mailer = SesMailer(FakeSes(error=_client_error()), 'x@y.com')
    with pytest.raises(DeliveryError, match='Email address is not verified.'):
        mailer.send('S', 'T', ['a@x.com'])


def test_ses_connection_error_becomes_delivery_error():
    mailer = SesMailer(FakeSes(error=EndpointConnectionError(endpoint_url='https://email.us-east-1.amazonaws.com')), 'x@y.com')
    with pytest.raises(DeliveryError):
        mailer.send('S', 'T', ['a@x.com'])


def test_activity_log_writes_item():
    table = FakeTable()
    assert ActivityLog(table).record('low_stock_alert', {'productName': 'Tape'}) is True
    item = table.puts[0]
    assert item['Action'] == 'low_stock_alert'
    assert item['Details'] == {'productName': 'Tape'}
    assert item['Id'] and item['CreatedAt']


def test_activity_log_failure_is_swallowed():
    table = FakeTable(error=_client_error('ProvisionedThroughputExceededException', 'slow down', 'PutItem'))
    assert ActivityLog(table).record('low_stock_alert', {}) is False


def test_inventory_low_stock_skips_malformed_items():
    table = FakeTable(pages=[[
        {'Sku': 'B', 'ProductName': 'Bolt', 'Quantity': Decimal('3')},
        {'Sku': 'A', 'ProductName': 'Anchor', 'Quantity': Decimal('0')},
        {'Sku': 'X', 'ProductName': 'Broken', 'Quantity': Decimal('-2')},
    ]])

    items = InventoryStore(table).low_stock(5)

    assert [i.sku for i in items] == ['A', 'B']


def test_inventory_expiring_filters_and_sorts():
    table = FakeTable(pages=[[
        {'ProductName': 'Late', 'Quantity': 1, 'ExpirationDate': '2026-11-10'},
        {'ProductName': 'Soon', 'Quantity': 2, 'ExpirationDate': '2026-10-20T10:00:00'},
        {'ProductName': 'Past', 'Quantity': 2, 'ExpirationDate': '2026-10-01'},
        {'ProductName': 'Bad', 'Quantity': 2, 'ExpirationDate': 'someday'},
    ]])

    items = InventoryStore(table).expiring_between(date(2026, 10, 19), date(2026, 11, 18))

    assert [i.name for i in items] == ['Soon', 'Late']


def test_inventory_errors_are_wrapped():
    table = FakeTable(error=_client_error('ResourceNotFoundException', 'no table', 'Scan'))
    with pytest.raises(InventoryError):
        InventoryStore(table).low_stock(5)


def test_load_settings_defaults():
    settings = load_settings({})
    assert settings.threshold == 5
    assert settings.fallback_recipients == ()
    assert settings.webhook_secret == ''
    assert settings.accounts_table == 'Accounts'
    assert settings.inventory_table == 'Inventory'
    assert settings.expiry_days == 30
    assert settings.sender == 'UniAsia <no-reply@uniasia.shop>'


def test_load_settings_from_env():
    settings = load_settings({
        'LOW_STOCK_THRESHOLD': '10',
        'ADMIN_FALLBACK_EMAILS': 'a@x.com, b@x.com,,',
        'LOW_STOCK_WEBHOOK_SECRET': 's3cret',
        'EXPIRY_LOOKAHEAD_DAYS': '7',
        'AWS_REGION': 'ap-southeast-1',
    })
    assert settings.threshold == 10
    assert settings.fallback_recipients == ('a@x.com', 'b@x.com')
    assert settings.webhook_secret == 's3cret'
    assert settings.expiry_days == 7
    assert settings.region == 'ap-southeast-1'


@pytest.mark.parametrize('value', ['five', '-1'])
def test_load_settings_rejects_bad_threshold(value):
    with pytest.raises(InvalidInput):
        load_settings({'LOW_STOCK_THRESHOLD': value})


def test_parse_email_list_empty():
    assert parse_email_list(None) == ()
    assert parse_email_list('') == ()
