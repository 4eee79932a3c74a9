from django import forms

from users.forms import AccountForm
from .payments import PLANS


class QuizAnswerForm(forms.Form):
    answer = forms.ChoiceField(widget=forms.RadioSelect)

    def __init__(self, *args, question=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.question = question
        self.fields['answer'].label = question.text
        self.fields['answer'].choices = [(option, option) for option in question.options]


class EmailCaptureForm(forms.Form):
    email = forms.EmailField(label="Where should we send your stack?")


class CheckoutForm(AccountForm):
    plan = forms.ChoiceField(choices=[(plan, plan) for plan in PLANS], widget=forms.HiddenInput)
