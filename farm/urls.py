"""URL declarations for the farm application.

Every page of the application and its JSON endpoints are mapped here.
Transactions, the financial summary and reports live in a separate views
module.
"""

from django.urls import path

from . import views
from . import views_finance as finance

urlpatterns = [
    # Authentication
    path('login/', views.login_view, name='login'),
    path('logout/', views.logout_view, name='logout'),
    path('register/', views.register, name='register'),
    path('profile/', views.profile_view, name='profile'),
    # Dashboard
    path('', views.dashboard, name='dashboard'),
    path('api/dashboard/', views.dashboard_data, name='dashboard_data'),
    # Settings and breed catalogue
    path('settings/', views.settings_view, name='settings'),
    path('settings/breeds/<int:pk>/toggle/', views.breed_toggle, name='breed_toggle'),
    # Animals
    path('animals/', views.animal_list, name='animal_list'),
    path('animals/add/', views.animal_add, name='animal_add'),
    path('animals/register/', views.animal_register, name='animal_register'),
    path('animals/<int:pk>/edit/', views.animal_edit, name='animal_edit'),
    path('animals/<int:pk>/delete/', views.animal_delete, name='animal_delete'),
    # Health records
    path('health/', views.health_list, name='health_list'),
    path('health/add/', views.health_add, name='health_add'),
    path('health/<int:pk>/edit/', views.health_edit, name='health_edit'),
    path('health/<int:pk>/delete/', views.health_delete, name='health_delete'),
    # Events
    path('events/', views.event_list, name='event_list'),
    path('events/add/', views.event_add, name='event_add'),
    path('events/<int:pk>/', views.event_detail, name='event_detail'),
    path('events/<int:pk>/edit/', views.event_edit, name='event_edit'),
    path('events/<int:pk>/delete/', views.event_delete, name='event_delete'),
    # Finance
    path('finance/', finance.transaction_list, name='transaction_list'),
    path('finance/add/', finance.transaction_add, name='transaction_add'),
    path('finance/summary/', finance.finance_summary, name='finance_summary'),
    path('finance/<int:pk>/', finance.transaction_detail, name='transaction_detail'),
    path('finance/<int:pk>/edit/', finance.transaction_edit, name='transaction_edit'),
    path('finance/<int:pk>/delete/', finance.transaction_delete, name='transaction_delete'),
    path('api/finance/summary/', finance.finance_summary_data, name='finance_summary_data'),
    # Reports
    path('reports/', finance.reports, name='reports'),
    # Alerts
    path('alerts/', views.alert_list, name='alert_list'),
    path('alerts/add/', views.alert_add, name='alert_add'),
    path('alerts/<int:pk>/edit/', views.alert_edit, name='alert_edit'),
    path('alerts/<int:pk>/status/', views.alert_status, name='alert_status'),
    path('alerts/<int:pk>/delete/', views.alert_delete, name='alert_delete'),
    # Notifications
    path('api/notifications/unread/', views.notifications_unread, name='notifications_unread'),
    path('api/notifications/mark-read/', views.notifications_mark_read, name='notifications_mark_read'),
]
