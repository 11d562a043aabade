import io
import pytest
from decimal import Decimal
from django.core.files.uploadedfile import SimpleUploadedFile
from django.urls import reverse
from PIL import Image
from rest_framework import status
from apps.meals.models import Dish, MealPlan, MealType, Recipe
from apps.mess.models import MessFacility


def png_file(name='dish.png'):
    buffer = io.BytesIO()
    Image.new('RGB', (2, 2), color='orange').save(buffer, format='PNG')
    return SimpleUploadedFile(name, buffer.getvalue(), content_type='image/png')


@pytest.mark.django_db
class TestDishAPI:
    """Tests for /api/meals/dishes/"""

    def test_chef_creates_dish_with_recipe(self, chef_client, item):
        url = reverse('meals:dish-list')
        response = chef_client.post(url, {
            'name': 'Lemon Rice',
            'category': 'Rice',
            'cost_per_5_students': '80.00',
            'recipes': [{'item': str(item.id), 'qty_per_5_students': '0.5'}],
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['recipes'][0]['item_name'] == 'Rice'

    def test_duplicate_name(self, chef_client, dish):
        url = reverse('meals:dish-list')
        response = chef_client.post(url, {'name': dish.name}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_store_cannot_create_dish(self, store_client):
        url = reverse('meals:dish-list')
        response = store_client.post(url, {'name': 'Lemon Rice'}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_partial_update(self, chef_client, dish, item):
        Recipe.objects.create(dish=dish, item=item, qty_per_5_students=Decimal('1'))
        url = reverse('meals:dish-detail', args=[dish.id])
        response = chef_client.patch(url, {'category': 'Special'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['category'] == 'Special'
        assert len(response.data['recipes']) == 1

    def test_cannot_delete_planned_dish(self, admin_client, lunch_plan, dish):
        url = reverse('meals:dish-detail', args=[dish.id])
        response = admin_client.delete(url)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert Dish.objects.filter(id=dish.id).exists()

    def test_upload_image(self, chef_client, dish, settings, tmp_path):
        settings.MEDIA_ROOT = tmp_path
        url = reverse('meals:dish-upload-image', args=[dish.id])
        response = chef_client.post(url, {'image': png_file()}, format='multipart')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['image_url']


@pytest.mark.django_db
class TestMealPlanAPI:
    """Tests for /api/meals/plans/"""

    def test_create_for_several_facilities(self, chef_client, facility, dish):
        south = MessFacility.objects.create(name='South Mess')

        url = reverse('meals:meal-plan-list')
        response = chef_client.post(url, {
            'mess_facility_ids': [str(facility.id), str(south.id)],
            'day': 0,
            'meal': MealType.BREAKFAST,
            'dishes': [{'dish': str(dish.id), 'is_main_dish': True}],
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert len(response.data['plans']) == 2
        assert MealPlan.objects.filter(day=0, meal=MealType.BREAKFAST).count() == 2

    def test_repeated_dish_rejected(self, chef_client, facility, dish):
        url = reverse('meals:meal-plan-list')
        response = chef_client.post(url, {
            'mess_facility_ids': [str(facility.id)],
            'day': 0,
            'meal': MealType.BREAKFAST,
            'dishes': [{'dish': str(dish.id)}, {'dish': str(dish.id)}],
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_cook_cannot_plan(self, cook_client, facility, dish):
        url = reverse('meals:meal-plan-list')
        response = cook_client.post(url, {
            'mess_facility_ids': [str(facility.id)],
            'day': 0,
            'meal': MealType.BREAKFAST,
            'dishes': [{'dish': str(dish.id)}],
        }, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_list_filtered_by_facility(self, cook_client, lunch_plan):
        url = reverse('meals:meal-plan-list')
        response = cook_client.get(url, {'mess_facility': str(lunch_plan.mess_facility_id)})

        assert response.status_code == status.HTTP_200_OK
        assert response.data[0]['dishes'][0]['dish_name'] == 'Veg Biryani'

    def test_requirements(self, cook_client, lunch_plan, dish, item):
        Recipe.objects.create(dish=dish, item=item, qty_per_5_students=Decimal('2'))
        url = reverse('meals:meal-plan-requirements', args=[lunch_plan.id])
        response = cook_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert Decimal(response.data['items'][0]['required_qty']) == Decimal('4')

    def test_fnb_manager_deletes_plan(self, fnb_client, lunch_plan):
        url = reverse('meals:meal-plan-detail', args=[lunch_plan.id])
        response = fnb_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT
