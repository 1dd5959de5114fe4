from scaffold.deploy.messaging import send_message_with_wallet, wait_for_seqno

WALLET = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"


class Flaky:
    def __init__(self, values):
        self.values = list(values)

    def get_seqno(self):
        value = self.values.pop(0)
        if isinstance(value, Exception):
            raise value
        return value


def test_wait_for_seqno_advances(no_sleep):
    assert wait_for_seqno(Flaky([3, 3, 4]), 3, poll_interval=2, max_attempts=10, sleep=no_sleep) is True
    assert no_sleep.calls == [2, 2, 2]


def test_wait_for_seqno_times_out(no_sleep):
    assert wait_for_seqno(Flaky([3] * 5), 3, poll_interval=1, max_attempts=5, sleep=no_sleep) is False
    assert len(no_sleep.calls) == 5


def test_transient_errors_use_up_attempts(no_sleep):
    wallet = Flaky([OSError("down"), TimeoutError("slow")])
    assert wait_for_seqno(wallet, 0, poll_interval=0, max_attempts=2, sleep=no_sleep) is False


def test_send_message_with_wallet(wallet, chain, no_sleep):
    assert send_message_with_wallet(wallet, WALLET, 5, b"\x01", poll_interval=0, max_attempts=3, sleep=no_sleep)
    assert chain.sent == [{"to": WALLET, "value": 5, "data": b"\x01", "seqno": 0}]


def test_send_message_not_accepted(wallet, chain, no_sleep):
    chain.accept = False
    assert not send_message_with_wallet(wallet, WALLET, 0, poll_interval=0, max_attempts=2, sleep=no_sleep)
    assert chain.sent[0]["data"] == b""

