import os
import tempfile
import unittest
from unittest import mock

from werkzeug.security import check_password_hash

from dotback import create_app
from dotback import levels
from dotback.models import Admin, LevelConfig, db
from dotback.seeding import DEFAULT_BACKGROUND, seed_admin, seed_data, seed_levels


class SeedingTestCase(unittest.TestCase):
    def setUp(self):
        self.db_fd, self.db_path = tempfile.mkstemp()
        self.upload_dir = tempfile.mkdtemp()
        self.config = {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{self.db_path}",
            "UPLOAD_FOLDER": self.upload_dir,
            "SEED_DEFAULT_LEVELS": False,
            "ADMIN_EMAIL": "Boss@DotBack.com",
            "ADMIN_PASSWORD": "s3cret-pass",
            "ADMIN_NAME": "Boss",
        }
        self.app = create_app(self.config)
        self.app_context = self.app.app_context()
        self.app_context.push()

    def tearDown(self):
        db.session.remove()
        db.drop_all()
        self.app_context.pop()
        os.close(self.db_fd)
        os.unlink(self.db_path)
        os.rmdir(self.upload_dir)

    def test_startup_creates_one_hashed_admin(self):
        admins = Admin.query.all()
        self.assertEqual(len(admins), 1)
        admin = admins[0]
        self.assertEqual(admin.email, "boss@dotback.com")
        self.assertEqual(admin.name, "Boss")
        self.assertNotEqual(admin.password_hash, "s3cret-pass")
        self.assertTrue(check_password_hash(admin.password_hash, "s3cret-pass"))

    def test_admin_seeding_is_idempotent(self):
        self.assertIsNone(seed_admin())
        create_app(self.config)
        self.assertEqual(Admin.query.count(), 1)

    def test_concurrent_admin_seed_keeps_one_row(self):
        # the existence check misses the row another process just wrote
        with mock.patch.object(Admin, "query") as query:
            query.first.return_value = None
            self.assertIsNone(seed_admin())
        self.assertEqual(Admin.query.count(), 1)
        self.assertEqual(Admin.query.one().email, "boss@dotback.com")

    def test_levels_are_not_seeded_unless_asked(self):
        self.assertEqual(LevelConfig.query.count(), 0)

    def test_seed_levels_creates_all_ten(self):
        created = seed_levels()
        self.assertEqual(created, list(range(1, 11)))
        listed = levels.list_levels()
        self.assertEqual([level["level"] for level in listed], list(range(1, 11)))
        for level in listed:
            self.assertEqual(level["background"], DEFAULT_BACKGROUND)
            self.assertEqual(level["dots"], [])
            self.assertEqual(level["useDefaultColors"], "default")
        self.assertEqual(seed_levels(), [])

    def test_partial_seed_converges_without_overwriting(self):
        levels.create_level({"level": 2, "targetScore": 77, "background": "#000"})
        levels.create_level({"level": 9})
        created = seed_levels()
        self.assertEqual(created, [1, 3, 4, 5, 6, 7, 8, 10])
        level_two = levels.get_level(2)
        self.assertEqual(level_two["targetScore"], 77)
        self.assertEqual(level_two["background"], "#000")

        levels.delete_level(4)
        self.assertEqual(seed_levels(), [4])
        self.assertEqual(LevelConfig.query.count(), 10)

    def test_seed_data_with_levels(self):
        admin, created = seed_data(include_levels=True)
        self.assertIsNone(admin)
        self.assertEqual(len(created), 10)


if __name__ == "__main__":
    unittest.main()
