import unittest

from support import ADMIN, STUDENT, SUPERADMIN, make_session_factory

from freezer.core.errors import (
    DuplicateUserError,
    PermissionDeniedError,
    UserNotFoundError,
    ValidationError,
)
from freezer.core.security import Identity
from freezer.services.user_service import (
    create_user,
    ensure_user,
    get_user,
    get_user_by_email,
    list_visible_users,
    set_user_role,
)


class UserServiceTest(unittest.TestCase):
    def setUp(self):
        Session, self.engine = make_session_factory()
        self.db = Session()
        for identity in (STUDENT, ADMIN, SUPERADMIN):
            ensure_user(self.db, identity)

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    def test_ensure_user_keeps_stored_role(self):
        promoted = Identity(uid=STUDENT.uid, email=STUDENT.email, role="superadmin")
        user = ensure_user(self.db, promoted)
        self.assertEqual(user.role, "student")

    def test_lookup_by_email_is_case_insensitive(self):
        self.assertEqual(get_user_by_email(self.db, " ADMIN@example.com ").uid, ADMIN.uid)
        self.assertIsNone(get_user_by_email(self.db, "nobody@example.com"))

    def test_visible_users(self):
        emails = [user.email for user in list_visible_users(self.db, SUPERADMIN)]
        self.assertEqual(emails, sorted(emails))
        self.assertEqual(len(emails), 3)
        self.assertEqual([u.uid for u in list_visible_users(self.db, ADMIN)], [STUDENT.uid])
        with self.assertRaises(PermissionDeniedError):
            list_visible_users(self.db, STUDENT)

    def test_admin_creates_students_only(self):
        user = create_user(self.db, ADMIN, " New@Example.com", "student", name=" New ")
        self.assertEqual(user.email, "new@example.com")
        self.assertEqual(user.name, "New")
        with self.assertRaises(PermissionDeniedError):
            create_user(self.db, ADMIN, "boss@example.com", "admin")

    def test_create_user_rejects_bad_input(self):
        with self.assertRaises(ValidationError) as ctx:
            create_user(self.db, SUPERADMIN, "x@example.com", "janitor")
        self.assertIn("role", ctx.exception.errors)
        with self.assertRaises(ValidationError):
            create_user(self.db, SUPERADMIN, "not-an-email", "student")
        with self.assertRaises(DuplicateUserError):
            create_user(self.db, SUPERADMIN, STUDENT.email, "student")

    def test_email_taken_by_another_identity(self):
        newcomer = Identity(uid="student-9", email=" Student@Example.com", role="student")
        with self.assertRaises(DuplicateUserError):
            ensure_user(self.db, newcomer)
        self.assertEqual(get_user_by_email(self.db, STUDENT.email).uid, STUDENT.uid)
        with self.assertRaises(UserNotFoundError):
            get_user(self.db, "student-9")

    def test_set_user_role(self):
        user = set_user_role(self.db, SUPERADMIN, STUDENT.uid, "admin")
        self.assertEqual(user.role, "admin")
        self.assertEqual(get_user(self.db, STUDENT.uid).role, "admin")
        with self.assertRaises(PermissionDeniedError):
            set_user_role(self.db, ADMIN, STUDENT.uid, "student")
        with self.assertRaises(UserNotFoundError):
            set_user_role(self.db, None, "ghost", "student")


if __name__ == "__main__":
    unittest.main()
