from django.contrib import admin
from .models import CommunityPost, PostComment, Module, VaultResource, CalendarEvent, Conversation, Message


class PostCommentInline(admin.TabularInline):
    model = PostComment
    extra = 0


@admin.register(CommunityPost)
class CommunityPostAdmin(admin.ModelAdmin):
    list_display = ['title', 'author', 'category', 'created_at']
    list_filter = ['category']
    search_fields = ['title', 'content']
    inlines = [PostCommentInline]


@admin.register(Module)
class ModuleAdmin(admin.ModelAdmin):
    list_display = ['order_index', 'title', 'duration', 'locked']
    list_editable = ['locked']
    ordering = ['order_index']


@admin.register(VaultResource)
class VaultResourceAdmin(admin.ModelAdmin):
    list_display = ['title', 'file_type', 'category', 'file_url']
    list_filter = ['file_type', 'category']


@admin.register(CalendarEvent)
class CalendarEventAdmin(admin.ModelAdmin):
    list_display = ['title', 'date', 'type']
    list_filter = ['type']


class MessageInline(admin.TabularInline):
    model = Message
    extra = 0
    readonly_fields = ['timestamp']


@admin.register(Conversation)
class ConversationAdmin(admin.ModelAdmin):
    list_display = ['user', 'participant_name', 'last_message_time', 'unread_count']
    search_fields = ['user__email', 'participant_name']
    readonly_fields = ['last_message', 'last_message_time']
    inlines = [MessageInline]
