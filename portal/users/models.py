"""
Modèles de l'application `users`.

Ce module définit un modèle `User` personnalisé (identifiant = email) qui n'est
qu'un miroir local des comptes du fournisseur d'identité:
- aucun mot de passe local n'est utilisable, l'authentification passe toujours
  par le fournisseur (voir `users.backends`);
- `idp_user_id` relie le compte local à l'utilisateur distant;
- `profile_completed_at` indique que l'invité a choisi son mot de passe et
  renseigné son nom (page `/set-password/`).
"""

from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models
from django.utils import timezone


class UserManager(BaseUserManager):
    """Gestionnaire personnalisé pour le modèle `User`.

    Rôle:
    - Créer des utilisateurs avec l'email comme identifiant unique.
    - Retrouver/créer le miroir local d'un compte du fournisseur d'identité.
    """

    def create_user(self, email, password=None, **extra_fields):
        """Crée et sauvegarde un utilisateur standard.

        Paramètres:
        - email (str): identifiant unique, obligatoire.
        - password (str|None): mot de passe local; en pratique `None`, ce qui
          rend le mot de passe local inutilisable.
        - extra_fields: attributs additionnels (first_name, idp_user_id...).

        Retour:
        - User: instance persistée.
        """
        if not email:
            raise ValueError("L'adresse email est obligatoire")

        email = self.normalize_email(email).lower()
        extra_fields.setdefault('is_active', True)
        user = self.model(email=email, **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        """Crée et sauvegarde un superutilisateur (accès à l'admin Django)."""
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Le superutilisateur doit avoir is_staff=True.')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Le superutilisateur doit avoir is_superuser=True.')

        return self.create_user(email, password, **extra_fields)

    def sync_from_identity(self, idp_user):
        """Retrouve ou crée le miroir local d'un utilisateur du fournisseur.

        Paramètres:
        - idp_user (dict): objet `user` renvoyé par le fournisseur
          (au minimum `id` et `email`).

        Retour:
        - User: instance à jour (idp_user_id renseigné).
        """
        email = (idp_user.get('email') or '').strip().lower()
        if not email:
            raise ValueError("Le fournisseur d'identité n'a pas renvoyé d'email")

        user = self.filter(email=email).first()
        if user is None:
            metadata = idp_user.get('user_metadata') or {}
            return self.create_user(
                email,
                idp_user_id=idp_user.get('id') or '',
                first_name=metadata.get('first_name', ''),
                last_name=metadata.get('last_name', ''),
            )

        if idp_user.get('id') and user.idp_user_id != idp_user['id']:
            user.idp_user_id = idp_user['id']
            user.save(update_fields=['idp_user_id'])
        return user


class User(AbstractBaseUser, PermissionsMixin):
    """Miroir local d'un compte du fournisseur d'identité (auth par email)."""

    email = models.EmailField(
        verbose_name="Adresse email",
        max_length=255,
        unique=True,
    )
    first_name = models.CharField(verbose_name="Prénom", max_length=150, blank=True)
    last_name = models.CharField(verbose_name="Nom", max_length=150, blank=True)

    idp_user_id = models.CharField(
        verbose_name="Identifiant fournisseur d'identité",
        max_length=64,
        blank=True,
        db_index=True,
    )
    profile_completed_at = models.DateTimeField(
        verbose_name="Profil complété le",
        blank=True,
        null=True,
    )

    is_active = models.BooleanField(verbose_name="Compte actif", default=True)
    is_staff = models.BooleanField(verbose_name="Membre du staff", default=False)
    date_joined = models.DateTimeField(verbose_name="Date d'inscription", default=timezone.now)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    EMAIL_FIELD = 'email'
    REQUIRED_FIELDS = []

    class Meta:
        verbose_name = "Utilisateur"
        verbose_name_plural = "Utilisateurs"
        ordering = ['-date_joined']

    def __str__(self):
        return f"{self.get_full_name()} ({self.email})"

    def get_full_name(self):
        """Nom complet, ou l'email si prénom/nom sont vides."""
        return f"{self.first_name} {self.last_name}".strip() or self.email

    def get_short_name(self):
        return self.first_name or self.email

    @property
    def has_completed_profile(self):
        return self.profile_completed_at is not None

    def complete_profile(self, first_name, last_name):
        """Enregistre le nom saisi sur `/set-password/` et horodate la complétion."""
        self.first_name = first_name.strip()
        self.last_name = last_name.strip()
        self.profile_completed_at = timezone.now()
        self.save(update_fields=['first_name', 'last_name', 'profile_completed_at'])
