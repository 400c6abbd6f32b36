from django.urls import path
from . import views

urlpatterns = [
    # Student
    path('api/catalog/', views.catalog_view, name='catalog'),
    path('api/slots/', views.slots_view, name='slots'),
    path('api/submissions/', views.submit_view, name='submit'),

    # Admin
    path('api/admin/login/', views.admin_login_view, name='admin_login'),
    path('api/admin/logout/', views.admin_logout_view, name='admin_logout'),
    path('api/admin/submissions/', views.admin_submissions, name='admin_submissions'),
    path('api/admin/submissions/export/', views.admin_export_csv, name='admin_export_csv'),
    path('api/admin/submissions/delete/', views.admin_delete_submission, name='admin_delete_submission'),
    path('api/admin/slots/reset/', views.admin_reset_slots, name='admin_reset_slots'),
]
