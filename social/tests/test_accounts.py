from django.test import TestCase

from social.identity import store
from social.models import Comment, Confession, Message, Notification, Post, Story, User

from .factories import JsonClientMixin, make_account


class SignupLoginTests(JsonClientMixin, TestCase):

    def test_signup(self):
        response = self.post_json(
            "/api/accounts", {"name": "Alice", "username": "alice", "password": "secret123"}
        )
        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body['username'], "alice")
        self.assertEqual(body['displayName'], "Alice")
        self.assertEqual(body['followers'], [])
        self.assertTrue(body['privacySettings']['allowDirectMessages'])
        self.assertNotIn('password', body)

    def test_signup_duplicate(self):
        make_account("alice")
        response = self.post_json(
            "/api/accounts", {"name": "Alice", "username": "alice", "password": "secret123"}
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error'], "This Username already exists")

    def test_signup_validation(self):
        response = self.post_json("/api/accounts", {"name": "Alice", "username": "alice", "password": "123"})
        self.assertEqual(response.status_code, 400)
        self.assertFalse(User.objects.exists())

    def test_login(self):
        make_account("alice", password="secret123")
        ok = self.post_json("/api/login", {"username": "alice", "password": "secret123"})
        self.assertEqual(ok.status_code, 200)
        self.assertEqual(ok.json()['username'], "alice")

        bad = self.post_json("/api/login", {"username": "alice", "password": "nope"})
        self.assertEqual(bad.status_code, 401)
        self.assertEqual(bad.json()['error'], "Invalid username or password")

    def test_list_and_detail(self):
        alice = make_account("alice")
        make_account("bob")

        listing = self.get_json("/api/accounts")
        self.assertEqual([a['username'] for a in listing.json()], ["alice", "bob"])

        detail = self.get_json(f"/api/accounts/{alice.id}")
        self.assertEqual(detail.json()['id'], alice.id)
        self.assertEqual(self.get_json("/api/accounts/9999").status_code, 404)


class ProfileUpdateTests(JsonClientMixin, TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.alice = make_account("alice", password="secret123")
        cls.bob = make_account("bob")

    def test_owner_updates_profile_and_privacy(self):
        response = self.put_json(
            f"/api/accounts/{self.alice.id}",
            {"displayName": "Alice A.", "bio": "hi", "privacySettings": {"showActivity": False}},
            caller=self.alice.id,
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body['displayName'], "Alice A.")
        self.assertEqual(body['bio'], "hi")
        self.assertFalse(body['privacySettings']['showActivity'])
        self.assertTrue(body['privacySettings']['allowDirectMessages'])

    def test_protected_fields_ignored(self):
        before = User.objects.get(id=self.alice.id)
        self.put_json(
            f"/api/accounts/{self.alice.id}",
            {"id": 77, "followers": [1, 2, 3], "verifiedID": True, "bio": "changed"},
            caller=self.alice.id,
        )
        after = User.objects.get(id=self.alice.id)
        self.assertEqual(after.followers, before.followers)
        self.assertFalse(after.verified_id)
        self.assertEqual(after.password, before.password)
        self.assertEqual(after.bio, "changed")
        self.assertFalse(User.objects.filter(id=77).exists())

    def test_hashed_placeholder_keeps_password(self):
        self.put_json(f"/api/accounts/{self.alice.id}", {"password": "hashed"}, caller=self.alice.id)
        self.assertTrue(User.objects.get(id=self.alice.id).check_password("secret123"))

    def test_password_change(self):
        response = self.put_json(f"/api/accounts/{self.alice.id}", {"password": "brandnew"}, caller=self.alice.id)
        self.assertEqual(response.status_code, 200)
        self.assertTrue(User.objects.get(id=self.alice.id).check_password("brandnew"))

    def test_updating_someone_else(self):
        response = self.put_json(f"/api/accounts/{self.bob.id}", {"bio": "hacked"}, caller=self.alice.id)
        self.assertEqual(response.status_code, 403)
        self.assertEqual(User.objects.get(id=self.bob.id).bio, "")

    def test_without_caller(self):
        response = self.put_json(f"/api/accounts/{self.alice.id}", {"bio": "x"})
        self.assertEqual(response.status_code, 403)

    def test_legacy_full_object_roundtrip(self):
        current = self.get_json(f"/api/accounts/{self.alice.id}").json()
        current['bio'] = "round trip"
        response = self.put_json(f"/api/accounts/{self.alice.id}", current, caller=self.alice.id)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['bio'], "round trip")

    def test_suspended_account_cannot_edit_profile_but_can_change_privacy(self):
        store.set_suspension(self.alice.id, True)

        profile = self.put_json(f"/api/accounts/{self.alice.id}", {"bio": "x"}, caller=self.alice.id)
        self.assertEqual(profile.status_code, 403)

        privacy = self.put_json(
            f"/api/accounts/{self.alice.id}", {"allowDirectMessages": False}, caller=self.alice.id
        )
        self.assertEqual(privacy.status_code, 200)

    def test_suspended_full_object_privacy_toggle(self):
        store.set_suspension(self.alice.id, True)
        current = self.get_json(f"/api/accounts/{self.alice.id}").json()
        current['privacySettings']['allowDirectMessages'] = False

        response = self.put_json(f"/api/accounts/{self.alice.id}", current, caller=self.alice.id)

        self.assertEqual(response.status_code, 200)
        self.assertFalse(response.json()['privacySettings']['allowDirectMessages'])
        self.assertTrue(response.json()['isSuspended'])

    def test_avatar_without_scheme_gets_https(self):
        response = self.put_json(
            f"/api/accounts/{self.alice.id}", {"avatar": "cdn.example.com/a.png"}, caller=self.alice.id
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['avatar'], "https://cdn.example.com/a.png")

    def test_invalid_boolean(self):
        response = self.put_json(
            f"/api/accounts/{self.alice.id}", {"allowDirectMessages": "no"}, caller=self.alice.id
        )
        self.assertEqual(response.status_code, 400)


class ModerationUpdateTests(JsonClientMixin, TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.owner = make_account("Alz")
        cls.admin = make_account("mod", is_admin=True)
        cls.alice = make_account("alice")

    def test_user_cannot_suspend_or_self_promote(self):
        suspend = self.put_json(f"/api/accounts/{self.owner.id}", {"isSuspended": True}, caller=self.alice.id)
        promote = self.put_json(f"/api/accounts/{self.alice.id}", {"isAdmin": True}, caller=self.alice.id)
        badge = self.put_json(f"/api/accounts/{self.alice.id}", {"badge": "gold"}, caller=self.alice.id)

        for response in (suspend, promote, badge):
            self.assertEqual(response.status_code, 403)
        self.assertFalse(User.objects.get(id=self.alice.id).is_admin)
        self.assertIsNone(User.objects.get(id=self.alice.id).badge)

    def test_unchanged_moderation_values_need_no_privilege(self):
        response = self.put_json(
            f"/api/accounts/{self.alice.id}",
            {"isSuspended": False, "isAdmin": False, "badge": None, "bio": "ok"},
            caller=self.alice.id,
        )
        self.assertEqual(response.status_code, 200)

    def test_admin_suspends(self):
        response = self.put_json(f"/api/accounts/{self.alice.id}", {"isSuspended": True}, caller=self.admin.id)
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()['isSuspended'])

        response = self.put_json(f"/api/accounts/{self.alice.id}", {"isSuspended": False}, caller=self.admin.id)
        self.assertFalse(response.json()['isSuspended'])

    def test_admin_suspends_with_full_object(self):
        current = self.get_json(f"/api/accounts/{self.alice.id}").json()
        current['isSuspended'] = True
        current['password'] = "hashed"

        response = self.put_json(f"/api/accounts/{self.alice.id}", current, caller=self.admin.id)

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()['isSuspended'])
        self.assertTrue(User.objects.get(id=self.alice.id).check_password("secret123"))

    def test_changed_profile_in_full_object_still_owner_only(self):
        current = self.get_json(f"/api/accounts/{self.alice.id}").json()
        current['isSuspended'] = True
        current['bio'] = "edited by a moderator"

        response = self.put_json(f"/api/accounts/{self.alice.id}", current, caller=self.admin.id)

        self.assertEqual(response.status_code, 403)
        alice = User.objects.get(id=self.alice.id)
        self.assertEqual(alice.bio, "")
        self.assertFalse(alice.is_suspended)

    def test_demoted_admin_refused_despite_cached_record(self):
        store.find_by_id(self.admin.id)
        # written by another process, so this process's cache is not told
        User.objects.filter(id=self.admin.id).update(is_admin=False)

        response = self.put_json(f"/api/accounts/{self.alice.id}", {"isSuspended": True}, caller=self.admin.id)

        self.assertEqual(response.status_code, 403)
        self.assertFalse(User.objects.get(id=self.alice.id).is_suspended)

    def test_admin_cannot_use_super_admin_powers(self):
        for payload in ({"badge": "blue"}, {"isAdmin": True}, {"grantFollowers": 10}):
            response = self.put_json(f"/api/accounts/{self.alice.id}", payload, caller=self.admin.id)
            self.assertEqual(response.status_code, 403, payload)

        alice = User.objects.get(id=self.alice.id)
        self.assertIsNone(alice.badge)
        self.assertFalse(alice.is_admin)
        self.assertEqual(alice.followers, [])

    def test_super_admin_powers(self):
        response = self.put_json(
            f"/api/accounts/{self.alice.id}",
            {"badge": "gold", "isAdmin": True, "grantFollowers": 3},
            caller=self.owner.id,
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body['badge'], "gold")
        self.assertEqual(body['badgeIssuedBy'], "Alz")
        self.assertTrue(body['isAdmin'])
        self.assertEqual(body['followers'], [-1, -2, -3])

    def test_badge_none_clears(self):
        store.assign_badge(self.alice.id, 'blue', issued_by=self.owner)
        response = self.put_json(f"/api/accounts/{self.alice.id}", {"badge": "none"}, caller=self.owner.id)
        self.assertIsNone(response.json()['badge'])
        self.assertIsNone(response.json()['badgeIssuedBy'])

    def test_grant_limit(self):
        response = self.put_json(f"/api/accounts/{self.alice.id}", {"grantFollowers": 5001}, caller=self.owner.id)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(User.objects.get(id=self.alice.id).followers, [])

    def test_verification_decision(self):
        User.objects.filter(id=self.alice.id).update(verification_requested=True)

        denied = self.put_json(f"/api/accounts/{self.alice.id}", {"verification": "approve"}, caller=self.alice.id)
        self.assertEqual(denied.status_code, 403)

        approved = self.put_json(f"/api/accounts/{self.alice.id}", {"verification": "approve"}, caller=self.admin.id)
        self.assertEqual(approved.status_code, 200)
        self.assertTrue(approved.json()['verifiedID'])
        self.assertFalse(approved.json()['verificationRequested'])
        self.assertTrue(
            Notification.objects.filter(user=self.alice, verb='verification_approved').exists()
        )

    def test_mixed_request_checked_before_any_write(self):
        response = self.put_json(
            f"/api/accounts/{self.alice.id}", {"bio": "new", "isAdmin": True}, caller=self.alice.id
        )
        self.assertEqual(response.status_code, 403)
        self.assertEqual(User.objects.get(id=self.alice.id).bio, "")


class SuspensionSnapshotTests(JsonClientMixin, TestCase):
    """A suspended account's attempts leave every store exactly as it was."""

    @classmethod
    def setUpTestData(cls):
        cls.alice = make_account("alice")
        cls.bob = make_account("bob")
        cls.post = Post.objects.create(user=cls.bob, text="hello")

    def _snapshot(self):
        post = Post.objects.get(id=self.post.id)
        return {
            'posts': list(Post.objects.values_list('id', 'text')),
            'likes': sorted(post.likes.values_list('id', flat=True)),
            'retweets': sorted(post.retweets.values_list('id', flat=True)),
            'comments': list(Comment.objects.values_list('id', 'text')),
            'messages': list(Message.objects.values_list('id', 'text')),
            'stories': list(Story.objects.values_list('id', 'text')),
            'confessions': list(Confession.objects.values_list('id', 'text')),
            'notifications': list(Notification.objects.values_list('id', 'verb')),
            'profile': User.objects.values('display_name', 'bio').get(id=self.alice.id),
        }

    def test_suspended_actions_rejected(self):
        store.set_suspension(self.alice.id, True)
        before = self._snapshot()

        attempts = [
            self.post_json("/api/posts", {"text": "new"}, caller=self.alice.id),
            self.post_json(f"/api/posts/{self.post.id}/like", caller=self.alice.id),
            self.post_json(f"/api/posts/{self.post.id}/retweet", caller=self.alice.id),
            self.post_json(f"/api/posts/{self.post.id}/comments", {"text": "hey"}, caller=self.alice.id),
            self.post_json(
                "/api/messages",
                {"senderId": self.alice.id, "receiverId": self.bob.id, "text": "hey"},
                caller=self.alice.id,
            ),
            self.post_json("/api/stories", {"text": "story"}, caller=self.alice.id),
            self.post_json("/api/confessions", {"text": "secret"}, caller=self.alice.id),
            self.put_json(f"/api/accounts/{self.alice.id}", {"displayName": "X"}, caller=self.alice.id),
        ]

        for response in attempts:
            self.assertEqual(response.status_code, 403)
            self.assertIn("suspended", response.json()['error'])
        self.assertEqual(self._snapshot(), before)


class VerificationRequestApiTests(JsonClientMixin, TestCase):

    def _request(self, account, caller=None):
        return self.post_json(
            f"/api/accounts/{account.id}/verification-request", caller=caller or account.id
        )

    def test_49999_followers(self):
        account = make_account("alice", followers=list(range(-1, -50000, -1)))
        response = self._request(account)
        self.assertEqual(response.status_code, 400)
        self.assertFalse(User.objects.get(id=account.id).verification_requested)

    def test_50000_followers_then_pending(self):
        account = make_account("alice", followers=list(range(-1, -50001, -1)))

        first = self._request(account)
        self.assertEqual(first.status_code, 200)
        self.assertEqual(first.json()['status'], "submitted")
        self.assertTrue(first.json()['account']['verificationRequested'])

        second = self._request(account)
        self.assertEqual(second.status_code, 200)
        self.assertEqual(second.json()['status'], "pending")

    def test_for_someone_else(self):
        account = make_account("alice", followers=list(range(-1, -50001, -1)))
        other = make_account("bob")
        self.assertEqual(self._request(account, caller=other.id).status_code, 403)


class AccountActionsApiTests(JsonClientMixin, TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.alice = make_account("alice")
        cls.bob = make_account("bob")
        cls.admin = make_account("mod", is_admin=True)

    def test_follow_toggle(self):
        response = self.post_json(f"/api/accounts/{self.bob.id}/follow", caller=self.alice.id)
        self.assertEqual(response.json(), {"action": "followed", "followers": 1, "following": 1})

        response = self.post_json(f"/api/accounts/{self.bob.id}/follow", caller=self.alice.id)
        self.assertEqual(response.json()['action'], "unfollowed")

    def test_follow_unknown_caller(self):
        response = self.post_json(f"/api/accounts/{self.bob.id}/follow", caller=9999)
        self.assertEqual(response.status_code, 403)

    def test_heartbeat(self):
        ok = self.post_json(f"/api/accounts/{self.alice.id}/heartbeat", caller=self.alice.id)
        self.assertEqual(ok.status_code, 200)
        self.assertIn("lastOnline", ok.json())

        other = self.post_json(f"/api/accounts/{self.alice.id}/heartbeat", caller=self.bob.id)
        self.assertEqual(other.status_code, 403)

    def test_admin_overview(self):
        User.objects.filter(id=self.alice.id).update(verification_requested=True)
        store.set_suspension(self.bob.id, True)

        response = self.get_json("/api/admin/overview", caller=self.admin.id)

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual([a['username'] for a in body['pendingVerifications']], ["alice"])
        self.assertEqual([a['username'] for a in body['suspended']], ["bob"])
        self.assertEqual([a['username'] for a in body['admins']], ["mod"])

    def test_admin_overview_refused_for_users(self):
        self.assertEqual(self.get_json("/api/admin/overview", caller=self.alice.id).status_code, 403)
