import logging

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.db.models import Count
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from .models import CommunityPost, PostLike, Module, VaultResource, CalendarEvent, Conversation, Message
from .serializers import (
    CommunityPostSerializer, CreatePostSerializer, PostCommentSerializer, ModuleSerializer,
    VaultResourceSerializer, CalendarEventSerializer, ConversationSerializer, MessageSerializer,
    SendMessageSerializer,
)

logger = logging.getLogger(__name__)

User = get_user_model()


def posts_with_counts():
    return (
        CommunityPost.objects.select_related('author')
        .annotate(like_count=Count('likes', distinct=True), comment_count=Count('comments', distinct=True))
        .order_by('-created_at')
    )


def _acting_user(request, user_id):
    """The logged-in user, or the user named in the request body."""
    if request.user.is_authenticated:
        return request.user
    if user_id is None:
        return None
    return User.objects.filter(pk=user_id).first()


@api_view(['GET', 'POST'])
def community_posts(request):
    if request.method == 'GET':
        try:
            return Response(CommunityPostSerializer(posts_with_counts(), many=True).data)
        except Exception:
            logger.exception("Error fetching posts")
            return Response({'error': 'Failed to fetch posts'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    serializer = CreatePostSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({'error': 'Title and content are required'}, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    try:
        post = CommunityPost.objects.create(
            author=_acting_user(request, data.get('userId')),
            title=data['title'],
            content=data['content'],
            category=data.get('category', ''),
        )
    except Exception:
        logger.exception("Error creating post")
        return Response({'error': 'Failed to create post'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response({'id': post.id, 'success': True})


@api_view(['POST'])
def like_post(request, post_id):
    user = _acting_user(request, request.data.get('userId'))
    if user is None:
        return Response({'error': 'userId is required'}, status=status.HTTP_400_BAD_REQUEST)

    try:
        post = CommunityPost.objects.get(pk=post_id)
    except CommunityPost.DoesNotExist:
        return Response({'error': 'Post not found'}, status=status.HTTP_404_NOT_FOUND)

    try:
        with transaction.atomic():
            PostLike.objects.get_or_create(user=user, post=post)
    except IntegrityError:
        # concurrent like from the same user, the row exists either way
        pass
    except Exception:
        logger.exception("Error liking post")
        return Response({'error': 'Failed to like post'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response({'likes': post.likes.count(), 'success': True})


@api_view(['GET'])
def post_comments(request, post_id):
    try:
        comments = CommunityPost.objects.get(pk=post_id).comments.select_related('user')
    except CommunityPost.DoesNotExist:
        return Response({'error': 'Post not found'}, status=status.HTTP_404_NOT_FOUND)
    return Response(PostCommentSerializer(comments, many=True).data)


@api_view(['GET'])
def modules(request):
    return Response(ModuleSerializer(Module.objects.order_by('order_index'), many=True).data)


def vault_queryset(category=None):
    resources = VaultResource.objects.order_by('-created_at')
    if category and category != 'all':
        resources = resources.filter(category=category)
    return resources


@api_view(['GET'])
def vault_resources(request):
    resources = vault_queryset(request.query_params.get('category'))
    return Response(VaultResourceSerializer(resources, many=True).data)


@api_view(['GET'])
def vault_resource_detail(request, resource_id):
    try:
        resource = VaultResource.objects.get(pk=resource_id)
    except VaultResource.DoesNotExist:
        return Response({'error': 'Resource not found'}, status=status.HTTP_404_NOT_FOUND)
    return Response(VaultResourceSerializer(resource).data)


@api_view(['GET', 'POST'])
def calendar_events(request):
    if request.method == 'GET':
        return Response(CalendarEventSerializer(CalendarEvent.objects.order_by('date'), many=True).data)

    serializer = CalendarEventSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({'error': 'Title and date are required', 'details': serializer.errors},
                        status=status.HTTP_400_BAD_REQUEST)
    try:
        event = serializer.save()
    except Exception:
        logger.exception("Error creating event")
        return Response({'error': 'Failed to create event'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response({'id': event.id, 'success': True})


@api_view(['GET'])
def conversations(request):
    user_id = request.query_params.get('userId')
    if user_id is None and request.user.is_authenticated:
        user_id = request.user.pk
    if user_id is None:
        return Response({'error': 'userId is required'}, status=status.HTTP_400_BAD_REQUEST)

    try:
        queryset = Conversation.objects.filter(user_id=int(user_id)).order_by('-last_message_time')
    except ValueError:
        return Response({'error': 'userId must be a number'}, status=status.HTTP_400_BAD_REQUEST)
    return Response(ConversationSerializer(queryset, many=True).data)


@api_view(['GET'])
def conversation_messages(request, conversation_id):
    messages = Message.objects.filter(conversation_id=conversation_id).order_by('timestamp', 'id')
    return Response(MessageSerializer(messages, many=True).data)


@api_view(['POST'])
def send_message(request):
    serializer = SendMessageSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({'error': 'conversationId and content are required'}, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    try:
        conversation = Conversation.objects.get(pk=data['conversationId'])
    except Conversation.DoesNotExist:
        return Response({'error': 'Conversation not found'}, status=status.HTTP_404_NOT_FOUND)

    try:
        message = conversation.add_message(data['content'], sender=_acting_user(request, data.get('senderId')))
    except Exception:
        logger.exception("Error sending message")
        return Response({'error': 'Failed to send message'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response({'id': message.id, 'success': True})
