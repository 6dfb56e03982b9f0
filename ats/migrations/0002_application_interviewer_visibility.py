from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('ats', '0001_initial'),
    ]

    operations = [
        migrations.AddField(
            model_name='application',
            name='interviewer_visibility',
            field=models.BooleanField(
                default=False,
                help_text='Let interviewers without a hiring role read the feedback debrief.',
            ),
        ),
    ]
