# src/taskflow/ui/results.py

# Result codes the add/edit form hands back to the task list.
RESULT_FIRST_USER = 1

ADD_TASK_RESULT_OK = RESULT_FIRST_USER
EDIT_TASK_RESULT_OK = RESULT_FIRST_USER + 1
