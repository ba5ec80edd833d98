from django.urls import path
from . import views

app_name = "inquiry"

urlpatterns = [
    path("submit/", views.inquiry_submit, name="submit"),
]
