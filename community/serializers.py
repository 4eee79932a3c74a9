from rest_framework import serializers

from .models import CommunityPost, PostComment, Module, VaultResource, CalendarEvent, Conversation, Message
from .utils import time_ago


class CommunityPostSerializer(serializers.ModelSerializer):
    author = serializers.CharField(source='author_name', read_only=True)
    avatar = serializers.CharField(source='author_avatar', read_only=True)
    likes = serializers.IntegerField(source='like_count', read_only=True, default=0)
    comments = serializers.IntegerField(source='comment_count', read_only=True, default=0)
    timeAgo = serializers.SerializerMethodField()

    class Meta:
        model = CommunityPost
        fields = ['id', 'title', 'content', 'category', 'created_at', 'author', 'avatar', 'likes', 'comments',
                  'timeAgo']

    def get_timeAgo(self, obj):
        return time_ago(obj.created_at)


class CreatePostSerializer(serializers.Serializer):
    userId = serializers.IntegerField(required=False, allow_null=True)
    title = serializers.CharField(max_length=200)
    content = serializers.CharField()
    category = serializers.CharField(max_length=50, required=False, allow_blank=True)


class PostCommentSerializer(serializers.ModelSerializer):
    author = serializers.SerializerMethodField()
    avatar = serializers.SerializerMethodField()

    class Meta:
        model = PostComment
        fields = ['id', 'content', 'created_at', 'author', 'avatar']

    def get_author(self, obj):
        return (obj.user.name if obj.user else '') or 'Anonymous'

    def get_avatar(self, obj):
        return obj.user.avatar if obj.user else ''


class ModuleSerializer(serializers.ModelSerializer):
    class Meta:
        model = Module
        fields = ['id', 'title', 'description', 'video_url', 'duration', 'order_index', 'locked']


class VaultResourceSerializer(serializers.ModelSerializer):
    class Meta:
        model = VaultResource
        fields = ['id', 'title', 'description', 'file_type', 'file_url', 'category', 'created_at']


class CalendarEventSerializer(serializers.ModelSerializer):
    day = serializers.IntegerField(read_only=True)
    time = serializers.CharField(read_only=True)

    class Meta:
        model = CalendarEvent
        fields = ['id', 'title', 'date', 'type', 'description', 'day', 'time']


class ConversationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Conversation
        fields = ['id', 'user', 'participant_name', 'participant_avatar', 'last_message', 'last_message_time',
                  'unread_count']


class MessageSerializer(serializers.ModelSerializer):
    class Meta:
        model = Message
        fields = ['id', 'conversation', 'sender', 'content', 'timestamp']


class SendMessageSerializer(serializers.Serializer):
    conversationId = serializers.IntegerField()
    senderId = serializers.IntegerField(required=False, allow_null=True)
    content = serializers.CharField()
