import uuid

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('barbers', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Service',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('name', models.CharField(max_length=150)),
                ('description', models.TextField(blank=True)),
                ('duration_minutes', models.PositiveIntegerField(
                    help_text='Appointment length in minutes',
                    validators=[django.core.validators.MinValueValidator(5)],
                )),
                ('price', models.DecimalField(
                    decimal_places=2, max_digits=8,
                    validators=[django.core.validators.MinValueValidator(0)],
                )),
                ('is_active', models.BooleanField(db_index=True, default=True)),
                ('barber', models.ForeignKey(
                    blank=True, null=True,
                    help_text='Leave empty for a shop-wide service.',
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='services',
                    to='barbers.barber',
                )),
            ],
            options={
                'verbose_name': 'Service',
                'verbose_name_plural': 'Services',
                'ordering': ['name', 'duration_minutes'],
                'abstract': False,
            },
        ),
    ]
