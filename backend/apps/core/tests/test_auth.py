import datetime

from rest_framework.test import APITestCase
from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework import status
from apps.museum import services
from apps.museum.tests.factories import create_artefact, create_exposition

User = get_user_model()


class AuthAPITests(APITestCase):
    def setUp(self):
        self.user = User.objects.create_user('curator', 'curator@museum.test', 'secret', is_staff=True)

    def test_login_success(self):
        res = self.client.post(reverse('core:login'),
                               {'username': 'curator', 'password': 'secret'}, format='json')
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data['user']['role'], 'CURATOR')
        self.assertIn('csrfToken', res.data)

    def test_login_bad_password(self):
        res = self.client.post(reverse('core:login'),
                               {'username': 'curator', 'password': 'wrong'}, format='json')
        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_login_missing_fields(self):
        res = self.client.post(reverse('core:login'), {}, format='json')
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_me_requires_authentication(self):
        res = self.client.get(reverse('core:me'))
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(user=self.user)
        res = self.client.get(reverse('core:me'))
        self.assertEqual(res.data['user']['username'], 'curator')

    def test_logout(self):
        self.client.force_authenticate(user=self.user)
        res = self.client.post(reverse('core:logout'))
        self.assertEqual(res.status_code, status.HTTP_200_OK)


class DashboardAPITests(APITestCase):
    def test_dashboard_counts(self):
        today = datetime.date.today()
        running = create_exposition(title='Gods of the Nile')
        ended = create_exposition(title='Last Summer',
                                  start_date=today - datetime.timedelta(days=60),
                                  end_date=today - datetime.timedelta(days=1))
        create_artefact(identification='EG1000')
        create_artefact(identification='EG1001')
        create_artefact(identification='EG1002', on_permanent_display=False,
                        location='In reserves')
        create_artefact(identification='EG1003', on_permanent_display=False,
                        location='In reserves')
        services.admit_artefacts(running, ['EG1000'], 'SYSTEM:TEST')
        services.admit_artefacts(ended, ['EG1001'], 'SYSTEM:TEST')
        services.add_visitors(running, 30)

        res = self.client.get(reverse('ui-dashboard'))
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data['artefact_count'], 4)
        self.assertEqual(res.data['on_loan_count'], 2)
        self.assertEqual(res.data['on_display_count'], 0)
        self.assertEqual(res.data['in_reserves_count'], 2)
        self.assertEqual(res.data['active_exposition_count'], 1)
        self.assertEqual(res.data['overdue_exposition_count'], 1)
        self.assertEqual(res.data['total_visitors'], 30)
        self.assertEqual(res.data['top_expositions'][0]['title'], 'Gods of the Nile')
