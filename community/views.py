import calendar
import logging
from functools import wraps

from django.conf import settings
from django.contrib.auth.decorators import login_required
from django.http import Http404
from django.shortcuts import render, redirect, get_object_or_404
from django.urls import reverse
from django.utils import timezone
from django.views.decorators.http import require_POST
from django.views.static import serve

from funnel import ai
from funnel.chat import ChatStore, ChatBusy
from .api_views import posts_with_counts, vault_queryset
from .forms import PostForm, MessageForm, ChatForm
from .models import Module, CalendarEvent, Conversation, VaultResource
from .utils import month_calendar

logger = logging.getLogger(__name__)

TABS = ('community', 'classroom', 'calendar', 'vault', 'messenger', 'about')
CHAT_SESSION_KEY = 'war_room_session_id'


def member_required(view):
    """Logged in and paid; everyone else goes back to the funnel."""
    @wraps(view)
    @login_required
    def wrapper(request, *args, **kwargs):
        if not request.user.has_community_access:
            return redirect('funnel:landing')
        return view(request, *args, **kwargs)
    return wrapper


def _war_room(request):
    store = ChatStore()
    session_id, transcript = store.get_or_create(request.session.get(CHAT_SESSION_KEY))
    request.session[CHAT_SESSION_KEY] = session_id
    return session_id, transcript


@member_required
def dashboard(request, tab='community'):
    if tab not in TABS:
        raise Http404("Unknown tab")

    context = {'tab': tab, 'tabs': TABS}

    if tab == 'community':
        form = PostForm()
        if request.method == 'POST':
            form = PostForm(request.POST)
            if form.is_valid():
                post = form.save(commit=False)
                post.author = request.user
                post.save()
                return redirect('community:dashboard_tab', tab='community')
        context.update(posts=posts_with_counts(), post_form=form)

    elif tab == 'classroom':
        _, transcript = _war_room(request)
        context.update(modules=Module.objects.order_by('order_index'), transcript=transcript, chat_form=ChatForm())

    elif tab == 'calendar':
        today = timezone.localdate()
        context.update(
            today=today,
            days=range(1, calendar.monthrange(today.year, today.month)[1] + 1),
            events_by_day=month_calendar(CalendarEvent.objects.order_by('date'), today=today),
            upcoming=CalendarEvent.objects.filter(date__gte=timezone.now()).order_by('date')[:5],
        )

    elif tab == 'vault':
        category = request.GET.get('category')
        context.update(
            resources=vault_queryset(category),
            category=category or 'all',
            categories=VaultResource.objects.exclude(category='').values_list('category', flat=True)
                                            .distinct().order_by('category'),
        )

    elif tab == 'messenger':
        conversations = Conversation.objects.filter(user=request.user).order_by('-last_message_time')
        context.update(conversations=conversations, active=None, message_form=MessageForm())
        conversation_id = request.GET.get('conversation')
        if conversation_id:
            active = get_object_or_404(Conversation, pk=conversation_id, user=request.user)
            context.update(active=active, thread=active.messages.select_related('sender'))

    return render(request, 'community/dashboard.html', context)


@member_required
@require_POST
def war_room_chat(request):
    form = ChatForm(request.POST)
    if form.is_valid():
        session_id, _ = _war_room(request)
        try:
            session_id, _, status = ChatStore().send(session_id, form.cleaned_data['message'])
        except ChatBusy:
            logger.info("War Room turn for %s dropped, previous reply still pending", request.user.email)
        else:
            request.session[CHAT_SESSION_KEY] = session_id
            if status != ai.STATUS_OK:
                logger.warning("War Room reply for %s fell back (%s)", request.user.email, status)
    return redirect('community:dashboard_tab', tab='classroom')


@member_required
@require_POST
def reply(request, conversation_id):
    conversation = get_object_or_404(Conversation, pk=conversation_id, user=request.user)
    form = MessageForm(request.POST)
    if form.is_valid():
        conversation.add_message(form.cleaned_data['content'], sender=request.user)
    url = reverse('community:dashboard_tab', kwargs={'tab': 'messenger'})
    return redirect(f"{url}?conversation={conversation.pk}")


def vault_file(request, path):
    """Serve a vault document. VAULT_DIR is read per request so it can move without a restart."""
    return serve(request, path, document_root=settings.VAULT_DIR)
