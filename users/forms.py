from django import forms
from django.contrib.auth import get_user_model, authenticate
from django.contrib.auth.password_validation import validate_password

UserModel = get_user_model()


class LoginForm(forms.Form):
    email = forms.EmailField()
    password = forms.CharField(widget=forms.PasswordInput)

    def __init__(self, *args, **kwargs):
        self.request = kwargs.pop('request', None)
        super().__init__(*args, **kwargs)

    def clean(self):
        cleaned_data = super().clean()
        email = cleaned_data.get('email')
        password = cleaned_data.get('password')

        if email and password:
            user = authenticate(request=self.request, username=email, password=password)

            if not user:
                raise forms.ValidationError("Invalid login credentials")

            cleaned_data['user'] = user
        return cleaned_data


class AccountForm(forms.Form):
    """
    Account credentials collected at checkout.

    A new email creates an account, a known email must present the right
    password so nobody can pay their way into someone else's account.
    """
    name = forms.CharField(max_length=150, required=False)
    email = forms.EmailField()
    password = forms.CharField(widget=forms.PasswordInput)

    def clean(self):
        cleaned_data = super().clean()
        email = cleaned_data.get('email')
        pw = cleaned_data.get('password')
        if not email or not pw:
            return cleaned_data

        existing = UserModel.objects.filter(email__iexact=email).first()
        if existing:
            if not existing.check_password(pw):
                raise forms.ValidationError("An account with this email already exists. Enter its password to continue.")
            cleaned_data['user'] = existing
        else:
            validate_password(pw)
        return cleaned_data

    def get_or_create_user(self):
        user = self.cleaned_data.get('user')
        if user:
            name = self.cleaned_data.get('name')
            if name and not user.name:
                user.name = name
                user.save(update_fields=['name'])
            return user
        return UserModel.objects.create_user(
            email=self.cleaned_data['email'],
            password=self.cleaned_data['password'],
            name=self.cleaned_data.get('name', ''),
        )
