from sqlalchemy.exc import OperationalError

from timesheets.schemas.employee import EmployeeCreate
from timesheets.services.credentials import CredentialVerifier


def test_new_employee_password_lifecycle(directory, db):
    directory.add(EmployeeCreate(number=0, user_name="alice"))
    verifier = CredentialVerifier(db)
    assert verifier.verify("alice", "password")

    verifier.change_password("alice", "x")
    assert not verifier.verify("alice", "password")
    assert verifier.verify("alice", "x")


def test_user_name_is_case_insensitive_but_password_is_exact(db, alice):
    verifier = CredentialVerifier(db)
    assert verifier.verify("ALICE", "password")
    assert not verifier.verify("alice", "Password")


def test_change_password_of_unknown_user_is_a_no_op(db):
    CredentialVerifier(db).change_password("ghost", "secret")
    assert not CredentialVerifier(db).verify("ghost", "secret")


def test_authenticate(db, alice):
    verifier = CredentialVerifier(db)
    assert verifier.authenticate("alice", "password").id == alice.id
    assert verifier.authenticate("alice", "wrong") is None
    assert verifier.authenticate("nobody", "password") is None


def test_authenticate_degrades_storage_failure(db, alice, monkeypatch):
    verifier = CredentialVerifier(db)

    def broken(user_name):
        raise OperationalError("SELECT", {}, Exception("connection lost"))

    monkeypatch.setattr(verifier, "_credential", broken)
    assert verifier.authenticate("alice", "password") is None


def test_is_admin(directory):
    assert CredentialVerifier.is_admin(directory.administrator())
    assert not CredentialVerifier.is_admin(None)
