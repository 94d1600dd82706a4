import pytest
from rest_framework.test import APIClient
from django.contrib.auth import get_user_model

User = get_user_model()

@pytest.fixture
def api_client():
    return APIClient()

@pytest.fixture
def curator(db):
    user = User.objects.create_user('curator', 'curator@museum.test', 'password', is_staff=True)
    return user
