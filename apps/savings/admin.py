from django.contrib import admin

from .models import SavingsGoal


@admin.register(SavingsGoal)
class SavingsGoalAdmin(admin.ModelAdmin):
    list_display = ['name', 'user', 'current_amount', 'target_amount', 'get_progress', 'deadline']
    search_fields = ['name', 'user__email']
    list_filter = ['deadline']

    @admin.display(description='Progress')
    def get_progress(self, obj):
        return f"{obj.progress_percent:.0f}%"
