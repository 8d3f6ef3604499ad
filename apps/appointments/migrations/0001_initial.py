import uuid

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('barbers', '0001_initial'),
        ('services', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Appointment',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('date', models.DateField(db_index=True)),
                ('start_time', models.TimeField()),
                ('end_time', models.TimeField()),
                ('duration_minutes', models.PositiveIntegerField(
                    help_text='Booked duration (service.duration_minutes at time of booking)',
                )),
                ('price', models.DecimalField(
                    decimal_places=2, default=0, max_digits=8,
                    help_text='Service price at time of booking',
                    validators=[django.core.validators.MinValueValidator(0)],
                )),
                ('status', models.CharField(
                    choices=[
                        ('PENDING', 'Pending'), ('CONFIRMED', 'Confirmed'),
                        ('COMPLETED', 'Completed'), ('CANCELLED', 'Cancelled'),
                    ],
                    db_index=True, default='PENDING', max_length=20,
                )),
                ('payment_status', models.CharField(
                    choices=[('UNPAID', 'Unpaid'), ('PAID', 'Paid')],
                    default='UNPAID', max_length=10,
                )),
                ('notes', models.TextField(blank=True)),
                ('cancelled_at', models.DateTimeField(blank=True, null=True)),
                ('cancellation_reason', models.TextField(blank=True)),
                ('paid_at', models.DateTimeField(blank=True, null=True)),
                ('barber', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='appointments',
                    to='barbers.barber',
                )),
                ('client', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='appointments',
                    to=settings.AUTH_USER_MODEL,
                )),
                ('service', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='appointments',
                    to='services.service',
                )),
            ],
            options={
                'verbose_name': 'Appointment',
                'verbose_name_plural': 'Appointments',
                'ordering': ['-date', '-start_time'],
                'constraints': [
                    models.UniqueConstraint(
                        condition=models.Q(('status', 'CANCELLED'), _negated=True),
                        fields=('barber', 'date', 'start_time'),
                        name='uq_live_appointment_slot',
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name='AppointmentStatusLog',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('from_status', models.CharField(blank=True, max_length=20)),
                ('to_status', models.CharField(max_length=20)),
                ('changed_by', models.CharField(help_text='username / system', max_length=150)),
                ('reason', models.TextField(blank=True)),
                ('changed_at', models.DateTimeField(auto_now_add=True)),
                ('appointment', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='status_logs',
                    to='appointments.appointment',
                )),
            ],
            options={
                'verbose_name': 'Appointment Status Log',
                'verbose_name_plural': 'Appointment Status Logs',
                'ordering': ['changed_at'],
            },
        ),
    ]
