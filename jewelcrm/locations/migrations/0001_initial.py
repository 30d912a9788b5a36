from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='Location',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('code', models.CharField(help_text='Stable identifier used when selecting audit locations', max_length=50, unique=True)),
                ('name', models.CharField(max_length=200)),
                ('location_type', models.CharField(choices=[('store', 'Store'), ('showroom', 'Showroom'), ('case', 'Display Case'), ('shelf', 'Shelf'), ('position', 'Position'), ('safe', 'Safe'), ('vault', 'Vault'), ('workshop', 'Workshop')], default='store', max_length=20)),
                ('description', models.TextField(blank=True)),
                ('capacity', models.PositiveIntegerField(blank=True, null=True)),
                ('security_level', models.CharField(choices=[('low', 'Low'), ('medium', 'Medium'), ('high', 'High')], default='medium', max_length=10)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('parent', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='children', to='locations.location')),
            ],
            options={
                'db_table': 'locations',
                'ordering': ['name'],
                'indexes': [models.Index(fields=['code'], name='locations_code_idx'), models.Index(fields=['parent'], name='locations_parent_idx')],
            },
        ),
    ]
