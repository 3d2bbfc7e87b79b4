"""
Admin Django pour l'application `users`.

Les comptes sont créés par le fournisseur d'identité (invitations n8n); l'admin
n'affiche que le miroir local et ne permet pas d'en créer.
"""

from django.contrib import admin
from django.utils.html import format_html

from .models import User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('email', 'first_name', 'last_name', 'profile_status', 'date_joined', 'last_login', 'is_active')
    list_filter = ('is_active', 'is_staff')
    search_fields = ('email', 'first_name', 'last_name', 'idp_user_id')
    ordering = ('-date_joined',)
    readonly_fields = ('email', 'idp_user_id', 'profile_completed_at', 'date_joined', 'last_login')
    fields = ('email', 'first_name', 'last_name', 'idp_user_id', 'profile_completed_at',
              'is_active', 'is_staff', 'date_joined', 'last_login')

    def has_add_permission(self, request):
        return False

    @admin.display(description="Profil")
    def profile_status(self, obj):
        """Badge coloré: profil complété (vert) ou invitation en attente (orange)"""
        if obj.has_completed_profile:
            return format_html('<span style="color:{};">{}</span>', '#2e7d32', 'Complété')
        return format_html('<span style="color:{};">{}</span>', '#FF7026', 'En attente')
