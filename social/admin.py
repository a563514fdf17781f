from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.contrib.auth.models import Group
from django.urls import reverse
from django.utils.html import format_html

from .identity import store
from .models import Comment, Confession, Message, Notification, Post, PrivacySettings, Story, User


def _short(text, limit):
    if not text:
        return "(empty)"
    return text[:limit] + '...' if len(text) > limit else text


# ==================== ADMIN CLASSES ====================

class PrivacySettingsInline(admin.StackedInline):
    model = PrivacySettings
    can_delete = False


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ('username', 'display_name', 'is_admin', 'is_suspended', 'verified_id', 'badge', 'follower_count')
    list_filter = ('is_admin', 'is_suspended', 'verified_id', 'verification_requested', 'badge')
    search_fields = ('username', 'display_name')
    inlines = [PrivacySettingsInline]
    fieldsets = BaseUserAdmin.fieldsets + (
        ('XVO profile', {'fields': ('display_name', 'bio', 'avatar', 'last_online')}),
        ('XVO moderation', {
            'fields': ('is_admin', 'is_suspended', 'verified_id', 'verification_requested', 'badge', 'badge_issued_by')
        }),
    )
    actions = ['suspend_users', 'unsuspend_users']

    def follower_count(self, obj):
        return len(obj.followers)
    follower_count.short_description = 'Followers'

    # go through the identity store so row locks and cache invalidation apply
    def suspend_users(self, request, queryset):
        for account in queryset:
            store.set_suspension(account.id, True)
        self.message_user(request, f"{queryset.count()} users suspended")
    suspend_users.short_description = "Suspend selected users"

    def unsuspend_users(self, request, queryset):
        for account in queryset:
            store.set_suspension(account.id, False)
        self.message_user(request, f"{queryset.count()} users unsuspended")
    unsuspend_users.short_description = "Lift suspension of selected users"


@admin.register(Post)
class PostAdmin(admin.ModelAdmin):
    list_display = ('id', 'user_link', 'timestamp', 'text_short')
    search_fields = ('text', 'user__username')

    def user_link(self, obj):
        url = reverse("admin:social_user_change", args=[obj.user.id])
        return format_html('<a href="{}">{}</a>', url, obj.user.username)
    user_link.short_description = 'User'
    user_link.admin_order_field = 'user__username'

    def text_short(self, obj):
        return _short(obj.text, 80)
    text_short.short_description = 'Text'


@admin.register(Comment)
class CommentAdmin(admin.ModelAdmin):
    list_display = ('id', 'user', 'post', 'timestamp', 'text_short')
    search_fields = ('text', 'user__username', 'post__id')

    def text_short(self, obj):
        return _short(obj.text, 50)
    text_short.short_description = 'Text'


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    list_display = ('id', 'sender', 'recipient', 'timestamp', 'is_read', 'text_short')
    list_filter = ('is_read', 'timestamp')
    search_fields = ('text', 'sender__username', 'recipient__username')

    def text_short(self, obj):
        return _short(obj.text, 50)
    text_short.short_description = 'Text'


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ('id', 'user', 'actor', 'verb', 'created_at', 'is_read')
    list_filter = ('verb', 'is_read', 'created_at')
    search_fields = ('user__username', 'actor__username')


@admin.register(Story)
class StoryAdmin(admin.ModelAdmin):
    list_display = ('id', 'user', 'timestamp')
    search_fields = ('text', 'user__username')


@admin.register(Confession)
class ConfessionAdmin(admin.ModelAdmin):
    list_display = ('id', 'timestamp', 'text_short')
    search_fields = ('text',)

    def text_short(self, obj):
        return _short(obj.text, 80)
    text_short.short_description = 'Text'


# Unregister Django's default Group
admin.site.unregister(Group)

# Basic admin site configuration
admin.site.site_header = "XVO Admin"
admin.site.site_title = "XVO Admin Portal"
admin.site.index_title = "Moderation"
