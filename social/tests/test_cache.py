from django.core.cache import cache
from django.test import TestCase

from social.cache import forget_account, get_account
from social.identity import store

from .factories import make_account


class AccountCacheTests(TestCase):

    def test_read_through(self):
        account = make_account("alice")
        self.assertIsNone(cache.get(f"account_{account.id}"))

        self.assertEqual(get_account(account.id), account)
        self.assertIsNotNone(cache.get(f"account_{account.id}"))

    def test_save_invalidates(self):
        account = make_account("alice")
        get_account(account.id)

        store.update(account.id, profile={'bio': "fresh"})

        self.assertIsNone(cache.get(f"account_{account.id}"))
        self.assertEqual(get_account(account.id).bio, "fresh")

    def test_missing_account_not_cached(self):
        self.assertIsNone(get_account(9999))
        self.assertIsNone(cache.get("account_9999"))

    def test_forget(self):
        account = make_account("alice")
        get_account(account.id)
        forget_account(account.id)
        self.assertIsNone(cache.get(f"account_{account.id}"))
