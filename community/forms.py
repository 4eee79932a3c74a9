from django import forms

from .models import CommunityPost


class PostForm(forms.ModelForm):
    CATEGORY_CHOICES = [
        ('Wins', 'Wins'),
        ('Help', 'Help'),
        ('Strategy', 'Strategy'),
    ]

    category = forms.ChoiceField(choices=CATEGORY_CHOICES)

    class Meta:
        model = CommunityPost
        fields = ['title', 'content', 'category']
        widgets = {
            'content': forms.Textarea(attrs={'rows': 3, 'placeholder': 'Share a win or ask the community...'}),
        }


class MessageForm(forms.Form):
    content = forms.CharField(widget=forms.Textarea(attrs={'rows': 2}), max_length=5000)


class ChatForm(forms.Form):
    message = forms.CharField(max_length=2000)

    def clean_message(self):
        message = self.cleaned_data['message'].strip()
        if not message:
            raise forms.ValidationError("Message is required")
        return message
