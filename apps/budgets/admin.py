from django.contrib import admin

from .models import Budget


@admin.register(Budget)
class BudgetAdmin(admin.ModelAdmin):
    list_display = ['category', 'amount', 'period', 'start_date', 'end_date', 'user']
    list_filter = ['period', 'start_date']
    search_fields = ['category__name', 'description', 'user__email']
    date_hierarchy = 'start_date'
    list_select_related = ['category', 'user']
