from django.urls import path, include

urlpatterns = [
    path('admin/', include('dashboard.urls')),
    path('', include('website.urls')),
]

handler404 = 'website.views.not_found'
