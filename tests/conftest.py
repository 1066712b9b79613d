import pytest

from stock_alerts.errors import DeliveryError, DirectoryError
from stock_alerts.notifier import AdminNotifier
from stock_alerts.service import StockAlertService
from stock_alerts.threshold import ThresholdMonitor


class FakeDirectory:
    def __init__(self, emails=(), error=None):
        self.emails = list(emails)
        self.error = error
        self.calls = 0

    def list_admin_emails(self):
        self.calls += 1
        if self.error:
            raise DirectoryError(self.error)
        return list(self.emails)


class FakeMailer:
    def __init__(self, error=None):
        self.error = error
        self.sent = []

    def send(self, subject, text, recipients, html=None):
        if self.error:
            raise DeliveryError(self.error)
        self.sent.append({'subject': subject, 'text': text, 'recipients': list(recipients), 'html': html})
        return f'msg-{len(self.sent)}'


class FakeActivityLog:
    def __init__(self):
        self.records = []

    def record(self, action, details):
        self.records.append((action, details))
        return True


class FakeTable:
    """Tabla DynamoDB mínima: scan por páginas y put_item."""

    def __init__(self, pages=None, name='Fake', error=None):
        self.pages = pages or [[]]
        self.name = name
        self.error = error
        self.scans = []
        self.puts = []

    def scan(self, **kwargs):
        if self.error:
            raise self.error
        self.scans.append(kwargs)
        index = kwargs.get('ExclusiveStartKey', {}).get('page', 0)
        resp = {'Items': self.pages[index]}
        if index + 1 < len(self.pages):
            resp['LastEvaluatedKey'] = {'page': index + 1}
        return resp

    def put_item(self, Item):
        if self.error:
            raise self.error
        self.puts.append(Item)


class FakeInventory:
    def __init__(self, low=(), expiring=()):
        self.low = list(low)
        self.expiring = list(expiring)
        self.calls = []

    def low_stock(self, threshold):
        self.calls.append(('low_stock', threshold))
        return list(self.low)

    def expiring_between(self, start, end):
        self.calls.append(('expiring_between', start, end))
        return list(self.expiring)


@pytest.fixture
def directory():
    return FakeDirectory(['a@x.com', 'b@x.com'])


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def activity_log():
    return FakeActivityLog()


@pytest.fixture
def notifier(directory, mailer, activity_log):
    return AdminNotifier(directory, mailer, fallback_recipients=['ops@uniasia.shop'],
                         activity_log=activity_log)


@pytest.fixture
def inventory():
    return FakeInventory()


@pytest.fixture
def service(notifier, inventory):
    return StockAlertService(ThresholdMonitor(5), notifier, inventory=inventory)
