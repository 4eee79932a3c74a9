import json
from unittest.mock import MagicMock, patch

import pytest

from funnel import ai
from tests.conftest import completion

ANSWERS = [
    {'question': 'What is your total estimated debt load?', 'answer': 'Over $100k (I\'m drowning)'},
    {'question': 'What is your primary objective?', 'answer': 'Total Financial Reset / Clean Slate'},
]


def fake_client(content=None, error=None):
    client = MagicMock()
    if error is not None:
        client.chat.completions.create.side_effect = error
    else:
        client.chat.completions.create.return_value = completion(content)
    return client


def test_build_quiz_prompt_lists_answers_in_order():
    prompt = ai.build_quiz_prompt(ANSWERS)
    assert prompt.startswith('User Profile:\n- What is your total estimated debt load?: Over $100k')
    assert prompt.index('debt load') < prompt.index('primary objective')
    assert prompt.endswith('Analyze and provide JSON output.')


def test_missing_key_falls_back_to_complete_default():
    outcome = ai.analyze_quiz(ANSWERS)

    assert outcome.status == ai.STATUS_FALLBACK
    assert outcome.is_fallback
    assert outcome.result == ai.DEFAULT_ANALYSIS
    assert all([outcome.result.archetype, outcome.result.plan, outcome.result.pdf_stack])


@pytest.mark.parametrize('content', ['not json at all', '[]', json.dumps({'archetype': 'X', 'plan': ''})])
def test_malformed_reply_falls_back(content):
    with patch('funnel.ai.get_client', return_value=fake_client(content)):
        outcome = ai.analyze_quiz(ANSWERS)
    assert outcome.status == ai.STATUS_FALLBACK
    assert outcome.result == ai.DEFAULT_ANALYSIS


def test_network_error_falls_back():
    with patch('funnel.ai.get_client', return_value=fake_client(error=ConnectionError('boom'))):
        outcome = ai.analyze_quiz(ANSWERS)
    assert outcome.status == ai.STATUS_FALLBACK
    assert 'boom' in outcome.error


def test_model_reply_is_parsed_and_label_normalized():
    reply = json.dumps({
        'archetype': 'The Drowning Debtor',
        'plan': 'Send validation letters to every collector.',
        'pdfStack': 'repo reversal stack',
    })
    client = fake_client(reply)
    with patch('funnel.ai.get_client', return_value=client):
        outcome = ai.analyze_quiz(ANSWERS)

    assert outcome.status == ai.STATUS_OK
    assert outcome.result.archetype == 'The Drowning Debtor'
    assert outcome.result.pdf_stack == 'Repo Reversal Stack'
    kwargs = client.chat.completions.create.call_args.kwargs
    assert kwargs['response_format'] == {'type': 'json_object'}
    assert kwargs['messages'][0]['role'] == 'system'


def test_unknown_label_passes_through():
    result = ai.parse_analysis(json.dumps({'archetype': 'A', 'plan': 'B', 'pdfStack': 'Mystery Stack'}))
    assert result.pdf_stack == 'Mystery Stack'


def test_known_label_gets_canonical_spelling():
    label = ai.PDF_STACKS[0]
    assert ai.normalize_pdf_stack(f'  {label.upper()} ') == label


def test_chat_reply_maps_roles_for_the_model():
    client = fake_client('Section 609 lets you request verification.')
    transcript = [
        {'role': 'model', 'text': ai.CHAT_INTRO},
        {'role': 'user', 'text': 'What is Section 609?'},
    ]
    with patch('funnel.ai.get_client', return_value=client):
        reply = ai.chat_reply(transcript)

    assert reply == 'Section 609 lets you request verification.'
    roles = [m['role'] for m in client.chat.completions.create.call_args.kwargs['messages']]
    assert roles == ['system', 'assistant', 'user']
