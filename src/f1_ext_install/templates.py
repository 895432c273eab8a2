from jinja2 import Template

#: the shell equivalent of :py:meth:`~f1_ext_install.system.apk.Apk.save_runtime_deps`
SAVE_RUNTIME_DEPS_TEMPLATE = Template(
    r"""runDeps="$( \
    scanelf --needed --nobanner --format '%n#p' --recursive {{ apk.scan_dir }} \
      | tr ',' '\n' \
      | sort -u \
      | awk 'system("[ -e {{ apk.lib_dir }}/" $1 " ]") == 0 { next } { print "so:" $1 }' \
  )" \
  && if [ -n "$runDeps" ]; then apk add --virtual {{ virtual }} $runDeps; fi"""
)

DOCKERFILE_RUN_TEMPLATE = Template(
    r"""RUN set -ex{% for step in steps %} \
  && {{ step }}{% endfor %}"""
)
