from django.contrib import admin
from django.urls import path, include

from django.conf import settings
from django.conf.urls.static import static
from apps.dashboard import views as dashboard_views

urlpatterns = [
    path('', dashboard_views.dashboard, name='home'),
    path('analytics/', dashboard_views.analytics, name='analytics'),

    path('admin/', admin.site.urls),
    path('accounts/', include('apps.accounts.urls')),
    path('transactions/', include('apps.transactions.urls')),
    path('budgets/', include('apps.budgets.urls')),
    path('savings/', include('apps.savings.urls')),
]

# serve uploaded receipts in development
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
