from django.contrib import admin
from django.utils.html import format_html
from django.db.models import Count

from .models import Transaction, Category, TYPE_INCOME


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    list_display = [
        'date',
        'get_type_display_colored',
        'get_amount_display',
        'category',
        'user',
        'has_receipt',
    ]
    date_hierarchy = 'date'
    list_filter = ['type', 'category__name']
    search_fields = ['description', 'category__name', 'user__email']
    list_select_related = ['category', 'user']

    @admin.display(description='Type', ordering='type')
    def get_type_display_colored(self, obj):
        if obj.type == TYPE_INCOME:
            return format_html('<span style="color:#059669; font-weight:bold;">{}</span>', 'Income')
        return format_html('<span style="color:#dc2626; font-weight:bold;">{}</span>', 'Expense')

    @admin.display(description='Amount', ordering='amount')
    def get_amount_display(self, obj):
        return f"{obj.amount:,.2f}"

    @admin.display(description='Receipt', boolean=True)
    def has_receipt(self, obj):
        return obj.has_receipt


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'type', 'user', 'get_color', 'get_transaction_count']
    list_filter = ['type']
    ordering = ['user', 'type', 'name']
    search_fields = ['name', 'user__email']

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.annotate(tx_count=Count('transactions'))

    @admin.display(description='Color')
    def get_color(self, obj):
        return format_html('<span style="display:inline-block;width:12px;height:12px;background:{};"></span> {}', obj.color, obj.color)

    @admin.display(description='Transactions', ordering='tx_count')
    def get_transaction_count(self, obj):
        return obj.tx_count
