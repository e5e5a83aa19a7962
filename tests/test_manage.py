# tests/test_manage.py
import pytest

import manage
from dealership import auth, crud


def test_promote_and_revoke_admin(db):
    auth.sign_up(db, "boss@example.com", "secret123", "Boss")
    manage.main(["promote-admin", "boss@example.com"])
    db.expire_all()
    assert crud.get_user_by_email(db, "boss@example.com").role == "admin"

    manage.main(["promote-admin", "boss@example.com", "--revoke"])
    db.expire_all()
    assert crud.get_user_by_email(db, "boss@example.com").role == "customer"


def test_promote_unknown_account_exits_non_zero(db):
    with pytest.raises(SystemExit) as exc:
        manage.main(["promote-admin", "nobody@example.com"])
    assert exc.value.code == 1
