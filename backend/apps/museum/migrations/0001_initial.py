import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Culture',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('name', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True)),
                ('period_description', models.CharField(blank=True, help_text='e.g. "first half of 2nd century BC"', max_length=255)),
                ('culture_map', models.CharField(blank=True, help_text='Link to a map of the territory', max_length=500)),
                ('start_year', models.IntegerField(blank=True, null=True)),
                ('end_year', models.IntegerField(blank=True, null=True)),
            ],
            options={
                'verbose_name': 'Culture',
                'verbose_name_plural': 'Cultures',
                'ordering': ['start_year', 'name'],
            },
        ),
        migrations.CreateModel(
            name='Exposition',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('title', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True)),
                ('start_date', models.DateField(blank=True, null=True)),
                ('end_date', models.DateField(blank=True, null=True)),
                ('image_url', models.CharField(blank=True, max_length=500)),
                ('visitor_count', models.PositiveIntegerField(default=0)),
            ],
            options={
                'verbose_name': 'Exposition',
                'verbose_name_plural': 'Expositions',
                'ordering': ['-start_date', 'title'],
            },
        ),
        migrations.CreateModel(
            name='Artefact',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('identification', models.CharField(help_text='Inventory code, e.g. EG1000', max_length=50, primary_key=True, serialize=False)),
                ('name', models.CharField(blank=True, max_length=255)),
                ('object_description', models.TextField(blank=True)),
                ('object_type', models.CharField(blank=True, help_text='e.g. statue, amphora', max_length=100)),
                ('material', models.CharField(blank=True, max_length=100)),
                ('cultural_phase', models.CharField(blank=True, max_length=255)),
                ('period_description', models.CharField(blank=True, help_text='e.g. "second half of 2nd century AD"', max_length=255)),
                ('start_year', models.IntegerField(blank=True, null=True)),
                ('end_year', models.IntegerField(blank=True, null=True)),
                ('date_of_entry', models.DateField(blank=True, null=True)),
                ('image_url', models.CharField(blank=True, max_length=500)),
                ('location', models.CharField(blank=True, max_length=255)),
                ('on_permanent_display', models.BooleanField(default=False)),
                ('in_exposition', models.BooleanField(default=False)),
                ('admitted_at', models.DateTimeField(blank=True, null=True)),
                ('culture', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='artefacts', to='museum.culture')),
                ('exposition', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='exposed_artefacts', to='museum.exposition')),
            ],
            options={
                'verbose_name': 'Artefact',
                'verbose_name_plural': 'Artefacts',
                'ordering': ['identification'],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('in_exposition', True), ('on_permanent_display', True), _negated=True), name='artefact_single_custody_state'),
                ],
            },
        ),
        migrations.CreateModel(
            name='LocationEvent',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('event_id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('event_type', models.CharField(choices=[('ROOM', 'Moved to room'), ('RESERVES', 'Sent to reserves'), ('ADMITTED', 'Admitted to exposition'), ('RELEASED', 'Released from exposition'), ('RELOCATED', 'Relocated')], max_length=20)),
                ('from_location', models.CharField(blank=True, max_length=255)),
                ('to_location', models.CharField(blank=True, max_length=255)),
                ('emitted_by', models.CharField(help_text='username, or SYSTEM:<task>', max_length=150)),
                ('artefact', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='location_events', to='museum.artefact')),
                ('exposition', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='location_events', to='museum.exposition')),
            ],
            options={
                'verbose_name': 'Location Event',
                'verbose_name_plural': 'Location Events',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['artefact', 'created_at'], name='idx_locevent_artefact'),
                ],
            },
        ),
    ]
