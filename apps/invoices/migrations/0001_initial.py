import uuid

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('appointments', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Invoice',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('invoice_number', models.CharField(help_text='INV-<year>-<NNNN>', max_length=20, unique=True)),
                ('issuer_name', models.CharField(max_length=120)),
                ('issuer_address', models.CharField(blank=True, max_length=255)),
                ('issuer_phone', models.CharField(blank=True, max_length=30)),
                ('issuer_email', models.EmailField(blank=True, max_length=254)),
                ('recipient_name', models.CharField(max_length=150)),
                ('recipient_email', models.EmailField(blank=True, max_length=254)),
                ('amount', models.DecimalField(
                    decimal_places=2, max_digits=8,
                    validators=[django.core.validators.MinValueValidator(0)],
                )),
                ('description', models.CharField(max_length=255)),
                ('is_paid', models.BooleanField(default=False)),
                ('paid_at', models.DateTimeField(blank=True, null=True)),
                ('appointment', models.OneToOneField(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='invoice',
                    to='appointments.appointment',
                )),
            ],
            options={
                'verbose_name': 'Invoice',
                'verbose_name_plural': 'Invoices',
                'ordering': ['-invoice_number'],
            },
        ),
    ]
