from taskboard.crud.crud_user import user
from taskboard.crud.crud_project import project
from taskboard.crud.crud_project_member import project_member
from taskboard.crud.crud_task import task
