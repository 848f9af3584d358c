"""
URL configuration for the GBMS project.

JSON endpoints are grouped per app:
    /budgeting/    proposal submission and allocations
    /expenditure/  expenditure recording and submission
    /workflow/     approval workflow state and decisions
"""
from django.contrib import admin
from django.urls import path, include
from django.views.generic import RedirectView
from django.contrib.auth import views as auth_views

urlpatterns = [
    path('admin/', admin.site.urls),
    path('login/', auth_views.LoginView.as_view(), name='login'),
    path('logout/', auth_views.LogoutView.as_view(), name='logout'),
    path('budgeting/', include('apps.budgeting.urls')),
    path('expenditure/', include('apps.expenditure.urls')),
    path('workflow/', include('apps.workflow.urls')),
    path('', RedirectView.as_view(url='/workflow/pending/', permanent=False), name='home'),
]
