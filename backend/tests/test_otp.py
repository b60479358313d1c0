# Overview: Pytest coverage for the OTP password-reset flow.

import smtplib
from datetime import timedelta

import pytest
from sqlalchemy.dialects import postgresql

from cloudbook.extensions import db
from cloudbook.models import Admin
from cloudbook.services import concurrency, mail_service, otp_service
from cloudbook.time_utils import utcnow


def _admin(email="owner@acme.test") -> Admin:
    db.session.expire_all()
    return db.session.query(Admin).filter_by(email=email).one()


class TestRequestOtp:

    def test_forgot_password_stores_hash_and_mails_code(self, client, admin_a, outbox):
        response = client.post('/api/auth/forgot-password', json={"email": "owner@acme.test"})

        assert response.status_code == 200
        assert response.get_json()["message"] == "OTP sent successfully"
        assert len(outbox) == 1
        to, code = outbox[0]
        assert to == "owner@acme.test"
        assert code.isdigit() and 100000 <= int(code) <= 999999

        admin = _admin()
        assert admin.otp == otp_service.hash_code(code)
        assert admin.otp != code
        remaining = admin.otp_expires_at - utcnow()
        assert timedelta(seconds=100) < remaining <= timedelta(seconds=120)

    def test_resend_replaces_pending_code(self, client, admin_a, outbox, monkeypatch):
        codes = iter(["111111", "222222"])
        monkeypatch.setattr(otp_service, "generate_code", lambda: next(codes))

        client.post('/api/auth/forgot-password', json={"email": "owner@acme.test"})
        response = client.post('/api/auth/resend-otp', json={"email": "owner@acme.test"})

        assert response.status_code == 200
        assert response.get_json()["message"] == "OTP resent successfully"
        assert _admin().otp == otp_service.hash_code("222222")

    @pytest.mark.parametrize("path", ['/api/auth/forgot-password', '/api/auth/resend-otp'])
    def test_email_is_required(self, client, db_session, outbox, path):
        assert client.post(path, json={}).status_code == 400
        assert outbox == []

    @pytest.mark.parametrize("path", ['/api/auth/forgot-password', '/api/auth/resend-otp'])
    def test_unknown_admin_is_404(self, client, db_session, outbox, path):
        response = client.post(path, json={"email": "ghost@acme.test"})

        assert response.status_code == 404
        assert response.get_json()["message"] == "Admin not found"
        assert outbox == []

    def test_mail_failure_is_500(self, client, admin_a, monkeypatch):
        def boom(to, code):
            raise mail_service.MailDeliveryError("relay refused")

        monkeypatch.setattr(mail_service, "send_otp_email", boom)

        response = client.post('/api/auth/forgot-password', json={"email": "owner@acme.test"})

        assert response.status_code == 500
        assert response.get_json()["message"] == "Error sending OTP. Please try again."


class TestVerifyOtp:

    def test_round_trip_succeeds_once(self, client, admin_a, outbox):
        client.post('/api/auth/forgot-password', json={"email": "owner@acme.test"})
        code = outbox[0][1]

        first = client.post('/api/auth/verify-otp', json={"email": "owner@acme.test", "otp": code})
        assert first.status_code == 200
        assert first.get_json()["message"] == "OTP verified successfully"

        admin = _admin()
        assert admin.otp is None
        assert admin.otp_expires_at is None

        second = client.post('/api/auth/verify-otp', json={"email": "owner@acme.test", "otp": code})
        assert second.status_code == 400

    def test_wrong_code(self, client, admin_a, outbox, monkeypatch):
        monkeypatch.setattr(otp_service, "generate_code", lambda: "123456")
        client.post('/api/auth/forgot-password', json={"email": "owner@acme.test"})

        response = client.post('/api/auth/verify-otp', json={"email": "owner@acme.test", "otp": "654321"})

        assert response.status_code == 400
        assert response.get_json()["message"] == "Invalid OTP"
        # a wrong guess does not consume the pending code
        assert _admin().otp == otp_service.hash_code("123456")

    def test_expired_code(self, client, admin_a, outbox):
        client.post('/api/auth/forgot-password', json={"email": "owner@acme.test"})
        code = outbox[0][1]

        admin = _admin()
        admin.otp_expires_at = utcnow() - timedelta(seconds=1)
        db.session.commit()

        response = client.post('/api/auth/verify-otp', json={"email": "owner@acme.test", "otp": code})

        assert response.status_code == 400
        assert response.get_json()["message"] == "Invalid or expired OTP"

    def test_nothing_pending(self, client, admin_a):
        response = client.post('/api/auth/verify-otp', json={"email": "owner@acme.test", "otp": "123456"})
        assert response.status_code == 400
        assert response.get_json()["message"] == "Invalid or expired OTP"

    def test_email_and_code_required(self, client, db_session):
        assert client.post('/api/auth/verify-otp', json={"email": "owner@acme.test"}).status_code == 400
        assert client.post('/api/auth/verify-otp', json={"otp": "123456"}).status_code == 400


class TestClearExpired:

    def test_clears_only_expired(self, app, admin_a, admin_b):
        now = utcnow()
        a, b = _admin("owner@acme.test"), _admin("owner@beta.test")
        a.otp, a.otp_expires_at = otp_service.hash_code("111111"), now - timedelta(minutes=5)
        b.otp, b.otp_expires_at = otp_service.hash_code("222222"), now + timedelta(minutes=1)
        db.session.commit()

        assert otp_service.clear_expired_otps() == 1
        assert _admin("owner@acme.test").otp is None
        assert _admin("owner@beta.test").otp is not None

    def test_cli_command(self, app, admin_a):
        a = _admin()
        a.otp, a.otp_expires_at = otp_service.hash_code("111111"), utcnow() - timedelta(minutes=5)
        db.session.commit()

        result = app.test_cli_runner().invoke(args=["maintenance", "clear-expired-otps"])

        assert result.exit_code == 0
        assert "Cleared 1 expired OTP(s)." in result.output


class TestMailRendering:

    def test_body_states_code_and_validity(self):
        html, text = mail_service.render_otp_email("482913", 2)
        assert "482913" in html and "482913" in text
        assert "2 minutes" in html


class TestVerifyLocksRow:

    def test_pending_row_is_selected_for_update(self, client, admin_a, outbox, monkeypatch):
        locked_sql = []

        def recording_lock(query):
            locked = concurrency.lock_for_update(query)
            locked_sql.append(str(locked.statement.compile(dialect=postgresql.dialect())))
            return locked

        monkeypatch.setattr(otp_service, "lock_for_update", recording_lock)
        client.post('/api/auth/forgot-password', json={"email": "owner@acme.test"})

        response = client.post('/api/auth/verify-otp', json={"email": "owner@acme.test", "otp": outbox[0][1]})

        assert response.status_code == 200
        assert len(locked_sql) == 1
        assert "FOR UPDATE" in locked_sql[0]
        assert "otp_expires_at >" in locked_sql[0]


class FakeSMTP:
    """Records the relay conversation; fail_on names a step that raises."""

    calls = []
    sent = []
    fail_on = None

    def __init__(self, host, port, timeout=None):
        if self.fail_on == "connect":
            raise ConnectionRefusedError("relay down")
        self.calls.append(("connect", host, port))

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.calls.append(("quit",))
        return False

    def starttls(self):
        self.calls.append(("starttls",))

    def login(self, user, password):
        self.calls.append(("login", user, password))

    def sendmail(self, sender, recipients, message):
        if self.fail_on == "sendmail":
            raise smtplib.SMTPRecipientsRefused({})
        self.calls.append(("sendmail", sender, tuple(recipients)))
        self.sent.append(message)


class TestSmtpDelivery:

    @pytest.fixture
    def relay(self, app, monkeypatch):
        monkeypatch.setattr(FakeSMTP, "calls", [])
        monkeypatch.setattr(FakeSMTP, "sent", [])
        monkeypatch.setattr(FakeSMTP, "fail_on", None)
        monkeypatch.setattr(mail_service.smtplib, "SMTP", FakeSMTP)
        monkeypatch.setitem(app.config, "MAIL_SUPPRESS_SEND", False)
        monkeypatch.setitem(app.config, "MAIL_SERVER", "smtp.gmail.com")
        monkeypatch.setitem(app.config, "MAIL_PORT", 587)
        monkeypatch.setitem(app.config, "MAIL_USERNAME", "u@x.test")
        monkeypatch.setitem(app.config, "MAIL_PASSWORD", "app-pass")
        return FakeSMTP

    def test_starttls_then_login_then_send(self, relay):
        mail_service.send_otp_email("owner@acme.test", "482913")

        assert relay.calls == [
            ("connect", "smtp.gmail.com", 587),
            ("starttls",),
            ("login", "u@x.test", "app-pass"),
            ("sendmail", "u@x.test", ("owner@acme.test",)),
            ("quit",),
        ]
        message = relay.sent[0]
        assert "Subject: Your OTP Code" in message
        assert "To: owner@acme.test" in message
        assert "text/plain" in message and "text/html" in message
        assert "482913" in message

    def test_no_login_without_username(self, app, relay, monkeypatch):
        monkeypatch.setitem(app.config, "MAIL_USERNAME", None)

        mail_service.send_otp_email("owner@acme.test", "482913")

        assert [c[0] for c in relay.calls] == ["connect", "starttls", "sendmail", "quit"]

    def test_refused_recipient_is_delivery_error(self, relay):
        relay.fail_on = "sendmail"

        with pytest.raises(mail_service.MailDeliveryError, match="Failed to send email"):
            mail_service.send_otp_email("owner@acme.test", "482913")
        assert relay.sent == []

    def test_unreachable_relay_is_delivery_error(self, relay):
        relay.fail_on = "connect"

        with pytest.raises(mail_service.MailDeliveryError):
            mail_service.send_otp_email("owner@acme.test", "482913")

    def test_suppressed_mail_never_connects(self, app, relay, monkeypatch):
        monkeypatch.setitem(app.config, "MAIL_SUPPRESS_SEND", True)

        mail_service.send_otp_email("owner@acme.test", "482913")

        assert relay.calls == []

    def test_forgot_password_reports_relay_failure(self, client, admin_a, relay):
        relay.fail_on = "sendmail"

        response = client.post('/api/auth/forgot-password', json={"email": "owner@acme.test"})

        assert response.status_code == 500
        assert response.get_json()["message"] == "Error sending OTP. Please try again."
