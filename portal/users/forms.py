"""
Formulaires de l'application `users`.

Définit les formulaires de demande d'accès, de connexion et de création du
mot de passe (complétion de profil après invitation).
"""

from django import forms
from django.core.exceptions import ValidationError

MIN_PASSWORD_LENGTH = 8


class RegisterForm(forms.Form):
    """Demande d'accès: une adresse email professionnelle."""
    email = forms.EmailField(
        label="Work Email",
        widget=forms.EmailInput(attrs={'placeholder': 'you@yourcompany.com'}),
        error_messages={
            'required': 'Please enter a valid email address.',
            'invalid': 'Please enter a valid email address.',
        },
    )

    def clean_email(self):
        return self.cleaned_data['email'].strip().lower()


class LoginForm(forms.Form):
    """Formulaire de connexion (vérifié par le fournisseur d'identité)"""
    email = forms.EmailField(label="Email", widget=forms.EmailInput(attrs={'placeholder': 'you@yourcompany.com'}))
    password = forms.CharField(label="Password", strip=False, widget=forms.PasswordInput(attrs={'placeholder': '••••••••'}))


class SetPasswordForm(forms.Form):
    """Complétion du profil: nom + nouveau mot de passe (x2)"""
    first_name = forms.CharField(label="First Name", max_length=150, required=False, widget=forms.TextInput(attrs={'placeholder': 'Jane'}))
    last_name = forms.CharField(label="Last Name", max_length=150, required=False, widget=forms.TextInput(attrs={'placeholder': 'Smith'}))
    password = forms.CharField(
        label="New Password",
        strip=False,
        widget=forms.PasswordInput(attrs={'placeholder': 'Minimum 8 characters', 'minlength': MIN_PASSWORD_LENGTH}),
    )
    confirm = forms.CharField(
        label="Confirm Password",
        strip=False,
        widget=forms.PasswordInput(attrs={'placeholder': 'Re-enter your password'}),
    )

    def clean(self):
        cleaned_data = super().clean()
        first_name = (cleaned_data.get('first_name') or '').strip()
        last_name = (cleaned_data.get('last_name') or '').strip()
        password = cleaned_data.get('password') or ''
        confirm = cleaned_data.get('confirm') or ''

        # Même ordre de vérification que l'écran: nom, longueur, confirmation
        if not first_name or not last_name:
            raise ValidationError("Please enter your first and last name.", code='name_required')
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError("Password must be at least 8 characters.", code='password_too_short')
        if password != confirm:
            raise ValidationError("Passwords do not match.", code='password_mismatch')

        cleaned_data['first_name'] = first_name
        cleaned_data['last_name'] = last_name
        return cleaned_data
