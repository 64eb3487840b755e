from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from registration.models import CustomUser


class CustomUserAdmin(UserAdmin):
    model = CustomUser
    list_display = ('username', 'email', 'name', 'role', 'login_method', 'last_signed_in', 'is_active')
    list_filter = ('role', 'login_method', 'is_staff', 'is_active')
    fieldsets = (
        (None, {'fields': ('username', 'password')}),
        ('Dados pessoais', {'fields': ('name', 'first_name', 'last_name', 'email')}),
        ('Identidade externa', {'fields': ('open_id', 'login_method')}),
        ('Permissões', {'fields': ('role', 'is_staff', 'is_active', 'is_superuser', 'groups', 'user_permissions')}),
        ('Datas importantes', {'fields': ('last_login', 'last_signed_in', 'date_joined')}),
    )
    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('username', 'email', 'password1', 'password2', 'role', 'is_staff', 'is_active')}
        ),
    )
    readonly_fields = ('last_signed_in',)
    search_fields = ('username', 'email', 'name', 'open_id')
    ordering = ('username',)

admin.site.register(CustomUser, CustomUserAdmin)
