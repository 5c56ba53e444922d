"""Blood classifications shared by users, inventory and ledger records."""
from django.db import models


class BloodType(models.TextChoices):
    A_POS = 'A+', 'A+'
    A_NEG = 'A-', 'A-'
    B_POS = 'B+', 'B+'
    B_NEG = 'B-', 'B-'
    AB_POS = 'AB+', 'AB+'
    AB_NEG = 'AB-', 'AB-'
    O_POS = 'O+', 'O+'
    O_NEG = 'O-', 'O-'


class BloodComponent(models.TextChoices):
    WHOLE_BLOOD = 'whole_blood', 'Whole blood'
    PACKED_RBC = 'packed_rbc', 'Packed red blood cells'
    PLASMA = 'plasma', 'Plasma'
    PLATELETS = 'platelets', 'Platelets'
    CRYOPRECIPITATE = 'cryoprecipitate', 'Cryoprecipitate'
