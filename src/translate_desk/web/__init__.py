"""web - FastAPI-интерфейс просмотра и редактирования переводов."""
