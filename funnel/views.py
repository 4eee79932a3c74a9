import logging
import math

from django.conf import settings
from django.contrib.auth import login
from django.http import Http404
from django.shortcuts import render, redirect
from django.urls import reverse
from django.views.decorators.http import require_POST

from integrations import mailjet
from . import ai, payments
from .forms import QuizAnswerForm, EmailCaptureForm, CheckoutForm
from .models import Lead
from .quiz import QuizRun, QUESTIONS

logger = logging.getLogger(__name__)

LEAD_EMAIL_KEY = 'lead_email'


def landing(request):
    return render(request, 'funnel/landing.html')


@require_POST
def start_quiz(request):
    QuizRun(request.session).start()
    return redirect('funnel:quiz')


def quiz(request):
    run = QuizRun(request.session)
    if run.is_complete:
        if run.result is None:
            run.start()
        else:
            return redirect('funnel:analyzing')

    question = run.current_question
    form = QuizAnswerForm(question=question)

    if request.method == 'POST':
        form = QuizAnswerForm(request.POST, question=question)
        if form.is_valid():
            run.record(form.cleaned_data['answer'])
            if not run.is_complete:
                return redirect('funnel:quiz')

            outcome = ai.analyze_quiz(run.formatted_answers())
            if outcome.status != ai.STATUS_OK:
                logger.warning("Quiz analysis finished with status %s: %s", outcome.status, outcome.error)
            run.store_outcome(outcome)
            return redirect('funnel:analyzing')

    return render(request, 'funnel/quiz.html', {
        'form': form,
        'question': question,
        'step': run.current_index + 1,
        'total': len(QUESTIONS),
        'progress': int(run.current_index * 100 / len(QUESTIONS)),
    })


def analyzing(request):
    run = QuizRun(request.session)
    if run.result is None:
        return redirect('funnel:quiz')

    remaining = run.seconds_until_reveal()
    if remaining <= 0:
        return redirect('funnel:results')
    return render(request, 'funnel/analyzing.html', {'refresh_after': math.ceil(remaining)})


def results(request):
    run = QuizRun(request.session)
    result = run.result
    if result is None:
        return redirect('funnel:quiz')
    if run.seconds_until_reveal() > 0:
        return redirect('funnel:analyzing')

    lead_email = request.session.get(LEAD_EMAIL_KEY)
    return render(request, 'funnel/results.html', {
        'result': result,
        'is_fallback': run.analysis_status != ai.STATUS_OK,
        'lead_email': lead_email,
        'email_form': None if lead_email else EmailCaptureForm(),
        'plans': {plan: amount / 100 for plan, amount in payments.PLANS.items()},
    })


@require_POST
def capture_email(request):
    run = QuizRun(request.session)
    result = run.result
    if result is None:
        return redirect('funnel:quiz')

    form = EmailCaptureForm(request.POST)
    if not form.is_valid():
        return render(request, 'funnel/results.html', {
            'result': result,
            'is_fallback': run.analysis_status != ai.STATUS_OK,
            'email_form': form,
            'plans': {plan: amount / 100 for plan, amount in payments.PLANS.items()},
        }, status=400)

    email = form.cleaned_data['email']
    Lead.objects.update_or_create(email=email, defaults={
        'archetype': result.archetype,
        'pdf_stack': result.pdf_stack,
        'plan': result.plan,
    })
    request.session[LEAD_EMAIL_KEY] = email

    # the offers are unlocked either way
    if not mailjet.send_pdf_stack_email(email, None, result.archetype, result.pdf_stack, result.plan):
        logger.warning("PDF stack email to %s was not sent", email)
    return redirect('funnel:results')


def checkout(request):
    plan = request.GET.get('plan') or request.POST.get('plan')
    if plan not in payments.PLANS:
        raise Http404("Unknown plan")

    initial = {'plan': plan, 'email': request.session.get(LEAD_EMAIL_KEY, '')}
    if request.user.is_authenticated:
        initial.update(email=request.user.email, name=request.user.name)
    form = CheckoutForm(initial=initial)

    if request.method == 'POST':
        form = CheckoutForm(request.POST)
        if form.is_valid():
            plan = form.cleaned_data['plan']
            user = form.get_or_create_user()
            try:
                intent = payments.create_payment_intent(plan, user.email, user=user)
            except payments.PaymentsNotConfigured:
                form.add_error(None, "Checkout is temporarily unavailable. Please try again later.")
            except Exception:
                logger.exception("Could not start checkout for %s", user.email)
                form.add_error(None, "We could not start your payment. Please try again.")
            else:
                login(request, user, backend='django.contrib.auth.backends.ModelBackend')
                return render(request, 'funnel/checkout_confirm.html', {
                    'plan': plan,
                    'amount': intent.amount / 100,
                    'client_secret': intent.client_secret,
                    'publishable_key': settings.STRIPE_PUBLISHABLE_KEY,
                    'return_url': request.build_absolute_uri(reverse('funnel:payment_complete')),
                })

    return render(request, 'funnel/checkout.html', {
        'form': form,
        'plan': plan,
        'amount': payments.PLANS[plan] / 100,
    })


def payment_complete(request):
    """Stripe redirects here after the card step."""
    payment_intent_id = request.GET.get('payment_intent')
    if not payment_intent_id:
        return redirect('funnel:landing')

    try:
        intent, payment = payments.verify_payment(payment_intent_id)
    except Exception:
        logger.exception("Payment verification failed for %s", payment_intent_id)
        return render(request, 'funnel/payment_pending.html', {'status': 'error'}, status=502)

    if payment.status == payments.SUCCEEDED:
        # the intent id travels in the URL, so it never logs anyone in by itself
        return redirect('community:dashboard')

    return render(request, 'funnel/payment_pending.html', {'status': intent.status})
