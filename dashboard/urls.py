from django.urls import path
from . import views

app_name = 'dashboard'

urlpatterns = [
    path('', views.index, name='home'),
    path('login/', views.login_view, name='login'),
    path('logout/', views.logout_view, name='logout'),
    path('gallery/', views.gallery, name='gallery'),
    path('prices/', views.prices, name='prices'),
    path('appointments/', views.appointments, name='appointments'),
    path('customers/', views.customers, name='customers'),
    path('calendar-data/', views.calendar_data, name='calendar_data'),
]
