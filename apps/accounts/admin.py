from django.contrib import admin
from .models import UserSettings, EmailOTP


@admin.register(UserSettings)
class UserSettingsAdmin(admin.ModelAdmin):
    list_display = [
        'user',
        'get_email',
        'currency',
        'gross_income',
        'red_line_amount',
        'theme',
        'updated_at',
    ]

    list_filter = [
        'currency',
        'theme',
    ]

    search_fields = [
        'user__username',
        'user__email',
        'user__first_name',
    ]

    fieldsets = [
        ('User', {
            'fields': ('user',)
        }),
        ('Financial defaults', {
            'fields': ('currency', 'gross_income', 'red_line_amount'),
            'classes': ('wide',),
        }),
        ('Appearance', {
            'fields': ('theme',),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    ]

    readonly_fields = ['created_at', 'updated_at']
    ordering = ['-created_at']

    @admin.display(description='Email')
    def get_email(self, obj):
        return obj.user.email


@admin.register(EmailOTP)
class EmailOTPAdmin(admin.ModelAdmin):
    list_display = ['user', 'purpose', 'get_masked_code', 'expires_at', 'attempts', 'used_at']
    list_filter = ['purpose']
    search_fields = ['user__email']
    readonly_fields = ['created_at', 'updated_at']

    @admin.display(description='Code')
    def get_masked_code(self, obj):
        # e.g. 123456 -> 12****
        return obj.code[:2] + '****' if obj.code else '-'
