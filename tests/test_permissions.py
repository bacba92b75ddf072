import unittest

from support import ADMIN, OTHER_STUDENT, STUDENT, SUPERADMIN

from freezer.core.errors import AuthError, PermissionDeniedError
from freezer.core.permissions import can, require, visible_roles


class PermissionsTest(unittest.TestCase):
    def test_everyone_reads_and_creates(self):
        for actor in (STUDENT, ADMIN, SUPERADMIN):
            for action in ("inventory:read", "inventory:create", "locations:read", "checkout:create"):
                with self.subTest(role=actor.role, action=action):
                    self.assertTrue(can(actor, action))

    def test_staff_only_actions(self):
        for action in ("checkout:list_all", "inventory:expire", "users:list"):
            with self.subTest(action=action):
                self.assertFalse(can(STUDENT, action))
                self.assertTrue(can(ADMIN, action))
                self.assertTrue(can(SUPERADMIN, action))

    def test_students_edit_only_their_items(self):
        own = {"createdBy": STUDENT.uid}
        self.assertTrue(can(STUDENT, "inventory:update", own))
        self.assertFalse(can(OTHER_STUDENT, "inventory:update", own))
        self.assertTrue(can(ADMIN, "inventory:update", own))
        self.assertFalse(can(STUDENT, "inventory:update"))

    def test_return_by_borrower_or_staff(self):
        class Record:
            user_id = STUDENT.uid

        self.assertTrue(can(STUDENT, "checkout:return", Record()))
        self.assertFalse(can(OTHER_STUDENT, "checkout:return", Record()))
        self.assertTrue(can(ADMIN, "checkout:return", Record()))

    def test_user_creation_rules(self):
        self.assertTrue(can(ADMIN, "users:create", "student"))
        self.assertFalse(can(ADMIN, "users:create", "admin"))
        self.assertTrue(can(SUPERADMIN, "users:create", "superadmin"))
        self.assertFalse(can(STUDENT, "users:create", "student"))
        self.assertFalse(can(ADMIN, "users:set_role"))
        self.assertTrue(can(SUPERADMIN, "users:set_role"))

    def test_unknown_action_denied(self):
        self.assertFalse(can(SUPERADMIN, "inventory:drop"))

    def test_require(self):
        with self.assertRaises(AuthError):
            require(None, "inventory:read")
        with self.assertRaises(PermissionDeniedError) as ctx:
            require(STUDENT, "inventory:expire")
        self.assertEqual(str(ctx.exception), "Insufficient permissions for inventory:expire")
        require(ADMIN, "inventory:expire")

    def test_visible_roles(self):
        self.assertIsNone(visible_roles(SUPERADMIN))
        self.assertEqual(visible_roles(ADMIN), ("student",))
        self.assertEqual(visible_roles(STUDENT), ())


if __name__ == "__main__":
    unittest.main()
