from django.urls import path
from . import views

urlpatterns = [
	path('', views.home, name='home'),
	path('about/', views.about, name='about'),
	path('styles/', views.styles, name='styles'),
	path('prices/', views.prices, name='prices'),
	path('book/', views.book, name='book'),
	path('contact/', views.contact, name='contact'),
	path('track-appointment/', views.track_appointment, name='track_appointment'),
]
