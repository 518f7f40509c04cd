from django.db import migrations


def create_groups(apps, schema_editor):
    # Sindicâncias e oitivas vivem no Firestore, por isso o grupo não tem
    # permissões de modelo: serve apenas para has_sindicante_access.
    Group = apps.get_model('auth', 'Group')

    group, created = Group.objects.get_or_create(name='Sindicante')
    if created:
        print("Group 'Sindicante' created.")
    else:
        print("Group 'Sindicante' already existed.")


def remove_groups(apps, schema_editor):
    Group = apps.get_model('auth', 'Group')
    Group.objects.filter(name='Sindicante').delete()


class Migration(migrations.Migration):

    dependencies = [
        ('auth', '0012_alter_user_first_name_max_length'),
    ]

    operations = [
        migrations.RunPython(create_groups, remove_groups),
    ]
