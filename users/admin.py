from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.translation import gettext_lazy as _
from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):

    ordering = ['email']
    list_display = ['email', 'name', 'membership_type', 'has_community_access', 'has_consult_access', 'is_staff']
    list_filter = ['membership_type', 'has_community_access', 'has_consult_access', 'is_staff']
    search_fields = ['email', 'name']
    fieldsets = (
        (None, {'fields': ('email', 'password', 'name', 'avatar')}),
        (_('Membership'), {'fields': ('membership_type', 'has_community_access', 'has_consult_access')}),
        (_('Permissions'), {'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions')}),
        (_('Important dates'), {'fields': ('last_login', 'date_joined')}),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'password1', 'password2'),
        }),
    )
