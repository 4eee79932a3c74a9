from django.db import models, transaction
from django.conf import settings
from django.utils import timezone


class CommunityPost(models.Model):
    author = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
                               related_name="posts")
    title = models.CharField(max_length=200)
    content = models.TextField()
    category = models.CharField(max_length=50, blank=True)  # Wins, Help, Strategy...
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return self.title

    @property
    def author_name(self):
        if self.author is None:
            return "Anonymous"
        return self.author.name or "Anonymous"

    @property
    def author_avatar(self):
        return self.author.avatar if self.author else ""


class PostLike(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="post_likes")
    post = models.ForeignKey(CommunityPost, on_delete=models.CASCADE, related_name="likes")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ("user", "post")


class PostComment(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
                             related_name="post_comments")
    post = models.ForeignKey(CommunityPost, on_delete=models.CASCADE, related_name="comments")
    content = models.TextField()
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["created_at"]


class Module(models.Model):
    """A classroom video lesson."""
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    video_url = models.URLField(blank=True)
    duration = models.CharField(max_length=20, blank=True)  # "45m"
    order_index = models.PositiveIntegerField(default=0)
    locked = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["order_index"]

    def __str__(self):
        return self.title


class VaultResource(models.Model):
    TYPE_PDF = "PDF"
    TYPE_VIDEO = "VIDEO"
    FILE_TYPE_CHOICES = [
        (TYPE_PDF, "PDF"),
        (TYPE_VIDEO, "Video"),
    ]

    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    file_type = models.CharField(max_length=10, choices=FILE_TYPE_CHOICES, default=TYPE_PDF)
    file_url = models.CharField(max_length=500, blank=True)  # /vault/<file> or an external link
    category = models.CharField(max_length=50, blank=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return self.title


class CalendarEvent(models.Model):
    TYPE_LIVE = "LIVE"
    TYPE_DROP = "DROP"
    TYPE_CHOICES = [
        (TYPE_LIVE, "Live call"),
        (TYPE_DROP, "Document drop"),
    ]

    title = models.CharField(max_length=200)
    date = models.DateTimeField()
    type = models.CharField(max_length=10, choices=TYPE_CHOICES, default=TYPE_LIVE)
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["date"]

    def __str__(self):
        return f"{self.title} ({self.date:%Y-%m-%d})"

    @property
    def day(self):
        return timezone.localtime(self.date).day

    @property
    def time(self):
        return timezone.localtime(self.date).strftime("%I:%M %p").lstrip("0")


class Conversation(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="conversations")
    participant_name = models.CharField(max_length=150)
    participant_avatar = models.CharField(max_length=500, blank=True)

    # denormalized from the newest Message, written in the same transaction
    last_message = models.TextField(blank=True)
    last_message_time = models.DateTimeField(default=timezone.now)
    unread_count = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-last_message_time"]

    def __str__(self):
        return f"{self.user} <-> {self.participant_name}"

    def add_message(self, content, sender=None):
        """Append a message and move the conversation preview to it, both or neither."""
        with transaction.atomic():
            message = Message.objects.create(conversation=self, sender=sender, content=content)
            Conversation.objects.filter(pk=self.pk).update(
                last_message=message.content,
                last_message_time=message.timestamp,
            )
        self.last_message = message.content
        self.last_message_time = message.timestamp
        return message


class Message(models.Model):
    conversation = models.ForeignKey(Conversation, on_delete=models.CASCADE, related_name="messages")
    sender = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
                               related_name="sent_messages")
    content = models.TextField()
    timestamp = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["timestamp", "id"]
