from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='SlotCounter',
            fields=[
                ('key', models.CharField(max_length=101, primary_key=True, serialize=False)),
                ('faculty_id', models.CharField(max_length=50)),
                ('subject_id', models.CharField(max_length=50)),
                ('remaining', models.PositiveIntegerField()),
            ],
            options={
                'ordering': ['subject_id', 'faculty_id'],
                'unique_together': {('faculty_id', 'subject_id')},
            },
        ),
        migrations.CreateModel(
            name='Submission',
            fields=[
                ('roll_number', models.CharField(max_length=20, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=100)),
                ('email', models.EmailField(max_length=254)),
                ('whatsapp_number', models.CharField(max_length=10)),
                ('submitted_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
            ],
            options={
                'ordering': ['-submitted_at'],
            },
        ),
        migrations.CreateModel(
            name='Selection',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('subject_id', models.CharField(max_length=50)),
                ('faculty_id', models.CharField(max_length=50)),
                ('submission', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='selections', to='selection.submission')),
            ],
            options={
                'ordering': ['submission', 'subject_id'],
                'unique_together': {('submission', 'subject_id')},
            },
        ),
    ]
