"""Page action catalog and role filtering."""

from carpool_console.models.enterprise_context import EnterpriseContext
from carpool_console.models.role import EnterpriseRole
from carpool_console.schemas.common_schemas import PageAction

# key -> (label, minimum role)
ACTIONS: dict[str, tuple[str, EnterpriseRole]] = {
    "view_analytics": ("查看分析", EnterpriseRole.MEMBER),
    "refresh": ("刷新", EnterpriseRole.VIEWER),
    "create_department": ("创建部门", EnterpriseRole.ADMIN),
    "edit_department": ("编辑部门", EnterpriseRole.ADMIN),
    "delete_department": ("删除部门", EnterpriseRole.ADMIN),
    "add_department_member": ("添加成员", EnterpriseRole.ADMIN),
    "change_department_member_role": ("修改成员角色", EnterpriseRole.ADMIN),
    "remove_department_member": ("移除成员", EnterpriseRole.ADMIN),
    "create_pool": ("创建账号池", EnterpriseRole.ADMIN),
    "edit_pool": ("编辑账号池", EnterpriseRole.ADMIN),
    "delete_pool": ("删除账号池", EnterpriseRole.ADMIN),
    "add_account": ("添加账号", EnterpriseRole.ADMIN),
    "link_oauth_account": ("OAuth授权", EnterpriseRole.ADMIN),
    "toggle_account": ("启用/禁用", EnterpriseRole.ADMIN),
    "delete_account": ("删除账号", EnterpriseRole.ADMIN),
    "set_budget": ("设置预算", EnterpriseRole.ADMIN),
    "assign_role": ("分配角色", EnterpriseRole.ADMIN),
    "revoke_role": ("撤销角色", EnterpriseRole.ADMIN),
    "invite_member": ("邀请成员", EnterpriseRole.ADMIN),
    "batch_invite": ("批量邀请", EnterpriseRole.ADMIN),
    "create_invite_link": ("生成邀请链接", EnterpriseRole.ADMIN),
    "switch_model": ("切换模型", EnterpriseRole.ADMIN),
}


def actions_for(context: EnterpriseContext, *keys: str) -> list[PageAction]:
    """Actions among ``keys`` the context's role may use, in the given order."""
    return [
        PageAction(key=key, label=ACTIONS[key][0])
        for key in keys
        if context.has_role(ACTIONS[key][1])
    ]
