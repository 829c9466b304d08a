import pytest

from scout_desk.schemas.user import RegistrationRequest, UserRole, UserStatus
from scout_desk.services.store_client import StoreReadError
from scout_desk.services.users import (
    AuthenticationError,
    PendingApprovalError,
    RegistrationError,
    UserNotFound,
    UserService,
    make_username,
    verify_password,
)


def _request(first="Marta", last="Silva", password="pw1234", confirmation=None):
    return RegistrationRequest(
        first_name=first,
        last_name=last,
        password=password,
        password_confirmation=password if confirmation is None else confirmation,
    )


@pytest.fixture
def service(repos):
    return UserService(repos.users)


def test_username_is_normalised():
    assert make_username("João Pedro", "Conceição") == "joaopedro.conceicao"


def test_first_user_becomes_approved_admin(service):
    user = service.register(_request())
    assert user.username == "marta.silva"
    assert user.role == UserRole.ADMIN
    assert user.status == UserStatus.APPROVED


def test_later_users_wait_for_approval(service):
    service.register(_request())
    second = service.register(_request("Rui", "Costa"))
    assert second.role == UserRole.SCOUT
    assert second.status == UserStatus.PENDING
    assert [u.id for u in service.pending()] == [second.id]


def test_duplicate_username_is_case_insensitive(service):
    service.register(_request())
    with pytest.raises(RegistrationError):
        service.register(_request("MARTA", "silva"))


def test_password_confirmation_must_match(service):
    with pytest.raises(RegistrationError):
        service.register(_request(confirmation="other"))


def test_password_is_hashed(service, repos):
    service.register(_request())
    stored = repos.users.list()[0]
    assert stored.password_hash != "pw1234"
    assert verify_password("pw1234", stored.password_hash)


def test_pending_user_cannot_log_in_until_approved(service):
    service.register(_request())
    rui = service.register(_request("Rui", "Costa"))
    with pytest.raises(PendingApprovalError):
        service.authenticate("rui.costa", "pw1234")

    service.approve(rui.id)
    assert service.authenticate("Rui.Costa", "pw1234").id == rui.id


def test_wrong_password_is_rejected(service):
    service.register(_request())
    with pytest.raises(AuthenticationError):
        service.authenticate("marta.silva", "nope")


def test_reject_removes_account(service, repos):
    service.register(_request())
    rui = service.register(_request("Rui", "Costa"))
    service.reject(rui.id)
    assert [u.username for u in repos.users.list()] == ["marta.silva"]
    with pytest.raises(UserNotFound):
        service.reject(rui.id)


def test_update_rebuilds_display_name(service):
    marta = service.register(_request())
    updated = service.update(marta.id, last_name="Souza", role=UserRole.SCOUT)
    assert updated.name == "Marta Souza"
    assert updated.role == UserRole.SCOUT


def test_registration_refused_when_users_cannot_be_read(service, fake_client, repos):
    service.register(_request())
    fake_client.fail_reads = True

    with pytest.raises(StoreReadError):
        service.register(_request("Rui", "Costa"))

    fake_client.fail_reads = False
    assert [u.username for u in repos.users.list()] == ["marta.silva"]


def test_unreachable_store_on_first_registration_grants_nothing(repos, fake_client):
    fake_client.fail_reads = True
    with pytest.raises(StoreReadError):
        UserService(repos.users).register(_request())
    assert "users" not in fake_client.data
