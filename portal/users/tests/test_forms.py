"""
Tests des formulaires de l'app users.
"""
from users.forms import RegisterForm, SetPasswordForm


def test_register_form_lowercases_email():
    form = RegisterForm({'email': '  Rep@Example.com '})
    assert form.is_valid()
    assert form.cleaned_data['email'] == 'rep@example.com'


def test_register_form_error_message():
    form = RegisterForm({'email': 'nope'})
    assert not form.is_valid()
    assert form.errors['email'] == ['Please enter a valid email address.']


def test_set_password_form_checks_name_first():
    form = SetPasswordForm({'first_name': '', 'last_name': '', 'password': 'x', 'confirm': 'y'})
    assert not form.is_valid()
    assert form.non_field_errors() == ['Please enter your first and last name.']


def test_set_password_form_valid():
    form = SetPasswordForm({'first_name': 'Jane', 'last_name': 'Smith', 'password': 'Secret123!', 'confirm': 'Secret123!'})
    assert form.is_valid()
